"""Orchestration of the recommendation optimization workflow.

The workflow for one run:
1. Run the traditional analyzers (when given source files)
2. Classify every result as SKIP, AUTO or AI_CANDIDATE
3. Attach template recommendations to AUTO results
4. Serve AI candidates from the pattern cache where possible
5. Batch the remaining candidates into completion requests, caching
   the recommendations of every successful batch
6. Report before/after completion-call statistics

Every result leaves the run with a resolution and a recommendation list;
per-file and per-batch failures degrade to fallback recommendations.
"""
import contextvars
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from ...core.config import OptimizerConfig
from ...core.exceptions import CompletionServiceError
from ...core.logging import bind_run_context, clear_run_context, get_logger
from ...models.analysis import AnalysisResult, Resolution, SourceFile
from ...models.batch import Batch, BatchOutcome
from ...models.statistics import OptimizationRun, OptimizationStatistics
from ..batching.scheduler import BatchScheduler
from ..cache.context import context_from_result
from ..cache.pattern_cache import DisabledCache, PatternCache, RecommendationCache
from ..classification.classifier import ManagedComponentPredicate, ResultClassifier
from ..classification.templates import fallback_recommendations
from ..completion.service import CompletionService, OfflineCompletionService
from .analysis import Analyzer, run_analyzers


class RecommendationOptimizer:
    """Composes classification, caching and batching into one run."""

    def __init__(
        self,
        completion_service: CompletionService,
        config: Optional[OptimizerConfig] = None,
        analyzers: Optional[Sequence[Analyzer]] = None,
        is_managed_component: Optional[ManagedComponentPredicate] = None
    ) -> None:
        """Initialize the optimizer.

        Components are created lazily and can be replaced through their
        properties.

        Args:
            completion_service: Port batches are submitted to
            config: Optimizer settings (defaults when omitted)
            analyzers: Analyzers used by ``analyze``
            is_managed_component: Predicate for the classifier
        """
        self.config = config or OptimizerConfig()
        self.completion_service = completion_service if self.config.enable_ai else OfflineCompletionService()
        self.analyzers: List[Analyzer] = list(analyzers or [])
        self._is_managed_component = is_managed_component
        self._cancelled = threading.Event()
        self._stats_lock = threading.Lock()
        self.logger = get_logger("orchestration.orchestrator")

    @property
    def classifier(self) -> ResultClassifier:
        """Get or create the ResultClassifier (lazy initialization)."""
        if not hasattr(self, '_classifier'):
            self._classifier = ResultClassifier(self.config, self._is_managed_component)
        return self._classifier

    @classifier.setter
    def classifier(self, value: ResultClassifier) -> None:
        self._classifier = value

    @property
    def cache(self) -> RecommendationCache:
        """Get or create the recommendation cache (lazy initialization)."""
        if not hasattr(self, '_cache'):
            if self.config.cache_enabled:
                self._cache = PatternCache(
                    ttl_seconds=self.config.cache_ttl_seconds,
                    sweep_age_seconds=self.config.cache_sweep_age_seconds,
                    max_size=self.config.cache_max_size,
                )
            else:
                self._cache = DisabledCache()
        return self._cache

    @cache.setter
    def cache(self, value: RecommendationCache) -> None:
        self._cache = value

    @property
    def scheduler(self) -> BatchScheduler:
        """Get or create the BatchScheduler (lazy initialization)."""
        if not hasattr(self, '_scheduler'):
            self._scheduler = BatchScheduler(self.completion_service, self.config)
        return self._scheduler

    @scheduler.setter
    def scheduler(self, value: BatchScheduler) -> None:
        self._scheduler = value

    def cancel(self) -> None:
        """Stop dispatching further batches.

        Batches already sent run to completion; batches not yet sent get
        the fallback.
        """
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def analyze(self, sources: Sequence[SourceFile]) -> OptimizationRun:
        """Run the analyzers over ``sources`` and optimize the results.

        Args:
            sources: Parsed source files

        Returns:
            OptimizationRun with annotated results and statistics
        """
        results = run_analyzers(sources, self.analyzers)
        return self.optimize(results)

    def optimize(self, results: List[AnalysisResult]) -> OptimizationRun:
        """Attach recommendations to every result while minimizing completion calls.

        Results are updated in place; their issues are never changed.

        Args:
            results: Analysis results, in report order

        Returns:
            OptimizationRun with the same result objects and the statistics
        """
        bind_run_context(uuid.uuid4().hex[:12])
        try:
            self.logger.info("optimization_start", file_count=len(results))
            stats = OptimizationStatistics(
                total_files=len(results),
                files_with_issues=sum(1 for result in results if result.issues),
            )

            classified = self.classifier.classify_batch(results)
            stats.ai_candidates = len(classified.ai_candidates)
            stats.auto_recommended = len(classified.auto)
            stats.skipped = len(classified.skipped)

            self._apply_fallback(classified.failed)
            self.classifier.mark_skipped(classified.skipped)
            self.classifier.apply_automatic_recommendations(classified.auto)

            needs_batching = self._resolve_from_cache(classified.ai_candidates, stats)
            if needs_batching:
                self._run_batches(self.scheduler.schedule(needs_batching), stats)

            stats.cache = self.cache.stats()
            self._log_statistics(stats)
            return OptimizationRun(results=results, statistics=stats)
        finally:
            clear_run_context()

    def _apply_fallback(self, results: List[AnalysisResult]) -> None:
        for result in results:
            result.recommendations = fallback_recommendations(result)
            result.resolution = Resolution.FALLBACK

    def _resolve_from_cache(self, candidates: List[AnalysisResult], stats: OptimizationStatistics) -> List[AnalysisResult]:
        """Serve AI candidates from the cache, returning those still needing a batch."""
        needs_batching: List[AnalysisResult] = []

        for result in candidates:
            try:
                cached = self.cache.get(context_from_result(result), result.issues)
            except Exception as e:
                self.logger.warning("cache_lookup_failed", file=result.file_path, error=str(e))
                cached = None

            if cached is None:
                needs_batching.append(result)
                continue

            result.recommendations = cached
            result.resolution = Resolution.CACHED
            stats.cache_hits += 1
            self.logger.debug("cached_recommendations_used", file=result.file_name)

        self.logger.info("cache_resolution_complete", cache_hits=stats.cache_hits, needs_batching=len(needs_batching))
        return needs_batching

    def _run_batches(self, batches: List[Batch], stats: OptimizationStatistics) -> None:
        if self.config.max_workers > 1 and len(batches) > 1:
            with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(batches))) as executor:
                # Worker threads log under the caller's run_id
                futures = [
                    executor.submit(contextvars.copy_context().run, self._process_batch, batch, stats)
                    for batch in batches
                ]
                for future in as_completed(futures):
                    future.result()
            return

        for batch in batches:
            self._process_batch(batch, stats)

    def _process_batch(self, batch: Batch, stats: OptimizationStatistics) -> None:
        """Dispatch one batch, or fall back if the run was cancelled; never raises."""
        if self.cancelled:
            outcome = BatchOutcome.failure(CompletionServiceError("Run cancelled before dispatch"))
            self.scheduler.apply(batch, outcome)
            self.logger.info("batch_skipped_cancelled", file_count=batch.item_count)
            with self._stats_lock:
                stats.fallback_batches += 1
            return

        try:
            outcome = self.scheduler.dispatch(batch)
        except Exception as e:
            # Injected scheduler raised
            self.logger.error("batch_dispatch_failed", file_count=batch.item_count, error=str(e))
            outcome = BatchOutcome.failure(e)
            self.scheduler.apply(batch, outcome)

        with self._stats_lock:
            stats.batches_dispatched += 1
            if not outcome.ok:
                stats.fallback_batches += 1

        if outcome.ok:
            self._cache_batch(batch)

    def _cache_batch(self, batch: Batch) -> None:
        for result in batch.results:
            try:
                self.cache.put(context_from_result(result), result.issues, result.recommendations)
            except Exception as e:
                self.logger.warning("cache_store_failed", file=result.file_path, error=str(e))

    def _log_statistics(self, stats: OptimizationStatistics) -> None:
        self.logger.info(
            "optimization_statistics",
            **{key: value for key, value in stats.to_dict().items() if key != "cache"},
            cache_summary=stats.cache.summary(),
        )
