"""Statistics reported at the end of an optimization run."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .analysis import AnalysisResult
from .cache import CacheStatistics


@dataclass
class OptimizationStatistics:
    """Before/after completion-call accounting for one run.

    Attributes:
        total_files: Results that entered the optimizer
        files_with_issues: Results carrying at least one issue
        ai_candidates: Results classified as worth a completion request
        auto_recommended: Results given template recommendations
        skipped: Results with nothing to recommend
        cache_hits: AI candidates served from the pattern cache
        batches_dispatched: Completion requests actually sent
        fallback_batches: Dispatched or cancelled batches that ended in fallback
        cache: Pattern cache counters at the end of the run
    """

    total_files: int = 0
    files_with_issues: int = 0
    ai_candidates: int = 0
    auto_recommended: int = 0
    skipped: int = 0
    cache_hits: int = 0
    batches_dispatched: int = 0
    fallback_batches: int = 0
    cache: CacheStatistics = field(default_factory=CacheStatistics)

    @property
    def baseline_calls(self) -> int:
        """Calls a one-request-per-file approach would have made."""
        return self.files_with_issues

    @property
    def optimized_calls(self) -> int:
        return self.batches_dispatched

    @property
    def calls_saved(self) -> int:
        return self.baseline_calls - self.optimized_calls

    @property
    def reduction_percentage(self) -> float:
        if self.baseline_calls == 0:
            return 0.0
        return self.calls_saved / self.baseline_calls * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "total_files": self.total_files,
            "files_with_issues": self.files_with_issues,
            "ai_candidates": self.ai_candidates,
            "auto_recommended": self.auto_recommended,
            "skipped": self.skipped,
            "cache_hits": self.cache_hits,
            "batches_dispatched": self.batches_dispatched,
            "fallback_batches": self.fallback_batches,
            "baseline_calls": self.baseline_calls,
            "optimized_calls": self.optimized_calls,
            "calls_saved": self.calls_saved,
            "reduction_percentage": round(self.reduction_percentage, 1),
            "cache": self.cache.to_dict(),
        }


@dataclass
class OptimizationRun:
    """Annotated results of one run together with its statistics."""

    results: List[AnalysisResult]
    statistics: OptimizationStatistics

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "results": [result.to_dict() for result in self.results],
            "statistics": self.statistics.to_dict(),
        }
