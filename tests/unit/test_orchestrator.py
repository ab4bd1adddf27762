"""Tests for RecommendationOptimizer.

Tests cover:
- Lazy initialization and setter injection of components
- End-to-end resolution of every result
- Cache reuse across files and runs
- Statistics
- Failure isolation, cancellation and parallel dispatch
"""

from unittest.mock import MagicMock

import pytest
import structlog

from conftest import FakeCompletionService, well_formed_reply
from recommendation_optimizer.constants import IssueTypes
from recommendation_optimizer.core.config import OptimizerConfig
from recommendation_optimizer.core.exceptions import CompletionServiceError
from recommendation_optimizer.features.cache import DisabledCache, PatternCache
from recommendation_optimizer.features.completion import OfflineCompletionService
from recommendation_optimizer.features.orchestration import RecommendationOptimizer, run_analyzers
from recommendation_optimizer.models.analysis import IssueSeverity, Resolution, SourceFile


def _ai_result(result_factory, issue_factory, name, description="Field counter is shared"):
    return result_factory(
        file_path=f"src/{name}.java",
        issues=[
            issue_factory(IssueTypes.DOUBLE_CHECKED_LOCKING, IssueSeverity.MEDIUM, line=1, description=description),
            issue_factory(IssueTypes.UNSAFE_PUBLICATION, IssueSeverity.MEDIUM, line=2, description=description),
        ],
    )


def _mixed_results(result_factory, issue_factory):
    return [
        result_factory(file_path="src/Clean.java", issues=[]),
        result_factory(file_path="src/Simple.java", issues=[issue_factory(severity=IssueSeverity.LOW)]),
        _ai_result(result_factory, issue_factory, "First", description="Field alpha in First is unsafe"),
        _ai_result(result_factory, issue_factory, "Second", description="Map beta leaks"),
    ]


class TestInitialization:
    """Tests for lazy component creation."""

    def test_lazy_components(self, fake_service):
        optimizer = RecommendationOptimizer(fake_service)
        assert not hasattr(optimizer, "_classifier")
        assert not hasattr(optimizer, "_cache")
        assert not hasattr(optimizer, "_scheduler")

        _ = optimizer.classifier, optimizer.cache, optimizer.scheduler

        assert isinstance(optimizer.cache, PatternCache)
        assert optimizer.scheduler.completion_service is fake_service

    def test_setter_injection(self, fake_service):
        optimizer = RecommendationOptimizer(fake_service)
        cache = MagicMock()
        optimizer.cache = cache
        assert optimizer.cache is cache

    def test_disabled_cache(self, fake_service):
        optimizer = RecommendationOptimizer(fake_service, OptimizerConfig(cache_enabled=False))
        assert isinstance(optimizer.cache, DisabledCache)

    def test_ai_disabled_uses_offline_service(self, fake_service):
        optimizer = RecommendationOptimizer(fake_service, OptimizerConfig(enable_ai=False))
        assert isinstance(optimizer.completion_service, OfflineCompletionService)


class TestOptimize:
    """Tests for the end-to-end workflow."""

    def test_every_result_is_resolved(self, fake_service, result_factory, issue_factory):
        results = _mixed_results(result_factory, issue_factory)

        run = RecommendationOptimizer(fake_service).optimize(results)

        assert run.results is results
        assert [r.resolution for r in results] == [
            Resolution.SKIPPED,
            Resolution.AUTO,
            Resolution.BATCHED,
            Resolution.BATCHED,
        ]
        assert [len(r.recommendations) for r in results] == [0, 1, 2, 2]
        assert fake_service.call_count == 1

    def test_issues_are_never_modified(self, fake_service, result_factory, issue_factory):
        results = _mixed_results(result_factory, issue_factory)
        before = [list(r.issues) for r in results]

        RecommendationOptimizer(fake_service).optimize(results)

        assert [r.issues for r in results] == before

    def test_only_auto_results_make_no_calls(self, fake_service, result_factory, issue_factory):
        results = [
            result_factory(file_path=f"src/W{i}.java", issues=[issue_factory(IssueTypes.UNSAFE_COLLECTION, IssueSeverity.LOW)])
            for i in range(80)
        ]

        run = RecommendationOptimizer(fake_service).optimize(results)

        assert fake_service.call_count == 0
        assert run.statistics.auto_recommended == 80
        assert run.statistics.optimized_calls == 0
        assert run.statistics.reduction_percentage == 100.0

    def test_statistics(self, fake_service, result_factory, issue_factory):
        results = [_ai_result(result_factory, issue_factory, f"W{i}", description=f"Map m{i} leaks")
                   for i in range(25)]

        stats = RecommendationOptimizer(fake_service).optimize(results).statistics

        assert stats.total_files == 25
        assert stats.files_with_issues == 25
        assert stats.ai_candidates == 25
        assert stats.batches_dispatched == 3
        assert stats.baseline_calls == 25
        assert stats.calls_saved == 22
        assert stats.reduction_percentage == pytest.approx(88.0)
        assert stats.to_dict()["optimized_calls"] == 3


class TestCacheReuse:
    """Tests for recommendation reuse through the pattern cache."""

    def test_same_shape_in_later_run_is_cached(self, fake_service, result_factory, issue_factory):
        """Test that a second run serves identical patterns from the cache."""
        optimizer = RecommendationOptimizer(fake_service)
        optimizer.optimize([_ai_result(result_factory, issue_factory, "OrderWorker", "Field total in OrderWorker")])

        later = _ai_result(result_factory, issue_factory, "UserWorker", "Field count in UserWorker")
        run = optimizer.optimize([later])

        assert fake_service.call_count == 1
        assert later.resolution == Resolution.CACHED
        assert len(later.recommendations) == 2
        assert run.statistics.cache_hits == 1
        assert run.statistics.optimized_calls == 0

    def test_failed_batches_are_not_cached(self, result_factory, issue_factory):
        service = FakeCompletionService(replies=[CompletionServiceError("down")])
        optimizer = RecommendationOptimizer(service)

        optimizer.optimize([_ai_result(result_factory, issue_factory, "A")])
        again = _ai_result(result_factory, issue_factory, "B")
        optimizer.optimize([again])

        assert service.call_count == 2
        assert again.resolution == Resolution.BATCHED

    def test_cache_lookup_failure_is_a_miss(self, fake_service, result_factory, issue_factory):
        optimizer = RecommendationOptimizer(fake_service)
        broken = MagicMock()
        broken.get.side_effect = RuntimeError("cache down")
        optimizer.cache = broken

        result = _ai_result(result_factory, issue_factory, "A")
        optimizer.optimize([result])

        assert result.resolution == Resolution.BATCHED


class TestFailureIsolation:
    """Tests for fallback behaviour."""

    def test_service_outage_gives_generic_recommendations(self, failing_service, result_factory, issue_factory):
        results = _mixed_results(result_factory, issue_factory)

        run = RecommendationOptimizer(failing_service).optimize(results)

        ai_results = results[2:]
        assert all(r.resolution == Resolution.FALLBACK for r in ai_results)
        assert all(len(r.recommendations) == len(r.issues) for r in ai_results)
        assert all(not r.has_errors for r in results)
        assert run.statistics.fallback_batches == 1
        assert run.statistics.batches_dispatched == 1

    def test_one_failed_batch_does_not_affect_others(self, result_factory, issue_factory):
        service = FakeCompletionService(replies=[CompletionServiceError("timeout"), well_formed_reply])
        config = OptimizerConfig(max_batch_size=2)
        results = [_ai_result(result_factory, issue_factory, f"W{i}", description=f"Map m{i} leaks")
                   for i in range(4)]

        RecommendationOptimizer(service, config).optimize(results)

        assert [r.resolution for r in results] == [
            Resolution.FALLBACK,
            Resolution.FALLBACK,
            Resolution.BATCHED,
            Resolution.BATCHED,
        ]

    def test_classification_failure_falls_back(self, fake_service, result_factory, issue_factory):
        optimizer = RecommendationOptimizer(fake_service)
        optimizer.classifier.is_managed_component = MagicMock(side_effect=RuntimeError("bad predicate"))
        result = _ai_result(result_factory, issue_factory, "A")

        run = optimizer.optimize([result])

        assert result.resolution == Resolution.FALLBACK
        assert len(result.recommendations) == 2
        assert run.statistics.ai_candidates == 0
        assert fake_service.call_count == 0

    def test_scheduler_exception_falls_back(self, fake_service, result_factory, issue_factory):
        optimizer = RecommendationOptimizer(fake_service)
        optimizer.scheduler.dispatch = MagicMock(side_effect=RuntimeError("scheduler bug"))
        result = _ai_result(result_factory, issue_factory, "A")

        run = optimizer.optimize([result])

        assert result.resolution == Resolution.FALLBACK
        assert run.statistics.fallback_batches == 1


class TestCancellationAndParallelism:
    """Tests for cancel() and concurrent batch dispatch."""

    def test_cancel_skips_undispatched_batches(self, result_factory, issue_factory):
        config = OptimizerConfig(max_batch_size=1)
        optimizer = RecommendationOptimizer(FakeCompletionService(), config)

        def reply_then_cancel(prompt):
            optimizer.cancel()
            return well_formed_reply(prompt)

        optimizer.completion_service.replies = [reply_then_cancel]
        results = [_ai_result(result_factory, issue_factory, f"W{i}", description=f"Map m{i} leaks")
                   for i in range(3)]

        run = optimizer.optimize(results)

        assert optimizer.cancelled
        assert [r.resolution for r in results] == [Resolution.BATCHED, Resolution.FALLBACK, Resolution.FALLBACK]
        assert run.statistics.batches_dispatched == 1
        assert run.statistics.fallback_batches == 2
        assert optimizer.completion_service.call_count == 1

    def test_parallel_dispatch(self, fake_service, result_factory, issue_factory):
        config = OptimizerConfig(max_batch_size=2, max_workers=4)
        results = [_ai_result(result_factory, issue_factory, f"W{i}", description=f"Map m{i} leaks")
                   for i in range(10)]

        run = RecommendationOptimizer(fake_service, config).optimize(results)

        assert fake_service.call_count == 5
        assert run.statistics.batches_dispatched == 5
        assert all(r.resolution == Resolution.BATCHED for r in results)
        assert all(len(r.recommendations) == 2 for r in results)

    def test_worker_threads_keep_run_id(self, result_factory, issue_factory):
        """Test that batches dispatched from the thread pool log under the run's run_id."""
        seen_run_ids = []

        def recording_reply(prompt):
            seen_run_ids.append(structlog.contextvars.get_contextvars().get("run_id"))
            return well_formed_reply(prompt)

        service = FakeCompletionService(replies=[recording_reply] * 5)
        config = OptimizerConfig(max_batch_size=2, max_workers=4)
        results = [_ai_result(result_factory, issue_factory, f"W{i}", description=f"Map m{i} leaks")
                   for i in range(10)]

        RecommendationOptimizer(service, config).optimize(results)

        assert len(seen_run_ids) == 5
        assert None not in seen_run_ids
        assert len(set(seen_run_ids)) == 1
        assert "run_id" not in structlog.contextvars.get_contextvars()


class TestAnalyze:
    """Tests for running analyzers before optimization."""

    def test_analyzer_failure_is_isolated(self, fake_service, issue_factory):
        class GoodAnalyzer:
            name = "good"

            def analyze(self, source):
                return [issue_factory(IssueTypes.UNSAFE_COLLECTION, IssueSeverity.LOW)]

        class BrokenAnalyzer:
            name = "broken"

            def analyze(self, source):
                if source.file_path.endswith("Bad.java"):
                    raise ValueError("parse error")
                return []

        sources = [
            SourceFile("src/Good.java", class_names=["Good"]),
            SourceFile("src/Bad.java", class_names=["Bad"], imports={"org.springframework.Foo"}),
        ]

        optimizer = RecommendationOptimizer(fake_service, analyzers=[GoodAnalyzer(), BrokenAnalyzer()])
        run = optimizer.analyze(sources)

        assert [len(r.issues) for r in run.results] == [1, 1]
        assert all(r.resolution == Resolution.AUTO for r in run.results)
        assert run.results[1].imports == {"org.springframework.Foo"}
        assert run.results[1].analyzed_classes == 1

    def test_run_analyzers_without_analyzers(self):
        results = run_analyzers([SourceFile("src/A.java")], [])
        assert len(results) == 1
        assert results[0].issues == []
