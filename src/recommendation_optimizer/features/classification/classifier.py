"""Result classification ("smart filtering").

Decides per analyzed file whether it is worth a completion request,
can be served by template recommendations, or needs nothing at all.
Classification is pure: it reads a result and returns a strategy.
"""
from typing import Callable, Iterable, List, Optional

from ...constants import MANAGED_FILENAME_HINTS, ClassificationDefaults
from ...core.config import OptimizerConfig
from ...core.logging import get_logger
from ...models.analysis import AnalysisResult, Resolution
from ...models.classification import (
    ClassificationResult,
    ClassificationSignals,
    Strategy,
)
from .scoring import ClassificationScoreCalculator
from .templates import template_recommendations

# Signature: (result: AnalysisResult) -> bool
ManagedComponentPredicate = Callable[[AnalysisResult], bool]


def filename_heuristic(result: AnalysisResult) -> bool:
    """Guess from the file name whether the file holds a managed component."""
    file_name = result.file_name.lower()
    return any(hint in file_name for hint in MANAGED_FILENAME_HINTS)


def make_managed_component_predicate(markers: Iterable[str]) -> ManagedComponentPredicate:
    """Build the default managed-component predicate.

    Component markers reported by the upstream parser decide when present;
    results without any markers fall back to the file-name heuristic.

    Args:
        markers: Marker names that identify a managed component

    Returns:
        Predicate over analysis results
    """
    managed = frozenset(markers)

    def is_managed_component(result: AnalysisResult) -> bool:
        if result.component_markers:
            return bool(result.component_markers & managed)
        return filename_heuristic(result)

    return is_managed_component


class ResultClassifier:
    """Classifies analysis results into SKIP, AUTO and AI_CANDIDATE."""

    def __init__(
        self,
        config: Optional[OptimizerConfig] = None,
        is_managed_component: Optional[ManagedComponentPredicate] = None
    ) -> None:
        """Initialize the classifier.

        Args:
            config: Thresholds (defaults when omitted)
            is_managed_component: Predicate marking privileged contexts;
                defaults to marker detection with a file-name fallback
        """
        self.config = config or OptimizerConfig()
        self.is_managed_component = is_managed_component or make_managed_component_predicate(
            self.config.managed_component_markers
        )
        self.scores = ClassificationScoreCalculator()
        self.logger = get_logger("classification.classifier")

    def compute_signals(self, result: AnalysisResult) -> ClassificationSignals:
        issues = result.issues
        return ClassificationSignals(
            complexity_score=self.scores.calculate_complexity_score(issues),
            severity_score=self.scores.calculate_severity_score(issues),
            has_interesting_patterns=self.scores.has_interesting_patterns(issues),
            is_managed_component=self.is_managed_component(result),
        )

    def classify(self, result: AnalysisResult) -> Strategy:
        """Determine the recommendation strategy for a single result.

        Args:
            result: Analysis result to classify

        Returns:
            SKIP, AUTO or AI_CANDIDATE
        """
        issue_count = len(result.issues)

        if issue_count == 0:
            return Strategy.SKIP

        # Too many issues: the file needs refactoring, not a completion
        if issue_count > self.config.max_issues_for_ai:
            self.logger.debug("too_many_issues_for_ai", file=result.file_name, issue_count=issue_count)
            return Strategy.AUTO

        signals = self.compute_signals(result)

        if self._is_high_value(issue_count, signals):
            strategy = Strategy.AI_CANDIDATE
        elif issue_count < self.config.min_issues_for_ai and signals.severity_score < self.config.min_severity_score:
            strategy = Strategy.AUTO
        else:
            # Medium complexity defaults to AI
            strategy = Strategy.AI_CANDIDATE

        self.logger.debug("result_classified", file=result.file_name, strategy=strategy.value, **signals.to_dict())
        return strategy

    def _is_high_value(self, issue_count: int, signals: ClassificationSignals) -> bool:
        if signals.severity_score >= self.config.critical_severity_score:
            return True

        if signals.is_managed_component and issue_count >= 2:
            return True

        if signals.has_interesting_patterns and signals.complexity_score >= ClassificationDefaults.INTERESTING_PATTERN_COMPLEXITY:
            return True

        if (issue_count >= ClassificationDefaults.MULTI_ISSUE_COUNT
                and signals.complexity_score >= ClassificationDefaults.MULTI_ISSUE_COMPLEXITY):
            return True

        return False

    def classify_batch(self, results: List[AnalysisResult]) -> ClassificationResult:
        """Partition results into the three strategy buckets.

        Every result lands in exactly one bucket; input order is kept
        within each bucket. A result whose classification raises goes to
        ``failed`` instead and the remaining results are still classified.

        Args:
            results: Results to classify

        Returns:
            ClassificationResult with the three buckets and the failures
        """
        classified = ClassificationResult()
        for result in results:
            try:
                strategy = self.classify(result)
            except Exception as e:
                self.logger.error("classification_failed", file=result.file_path, error=str(e))
                classified.failed.append(result)
                continue
            classified.bucket(strategy).append(result)

        self.logger.info(
            "results_classified",
            total_results=len(results),
            **classified.counts(),
            ai_reduction_percentage=round(classified.ai_reduction_percentage(len(results)), 1),
        )
        return classified

    def apply_automatic_recommendations(self, results: List[AnalysisResult]) -> None:
        """Attach template recommendations to AUTO results in place."""
        for result in results:
            result.recommendations = template_recommendations(result)
            result.resolution = Resolution.AUTO

    def mark_skipped(self, results: List[AnalysisResult]) -> None:
        for result in results:
            result.recommendations = []
            result.resolution = Resolution.SKIPPED
