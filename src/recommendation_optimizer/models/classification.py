"""Data models for result classification."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .analysis import AnalysisResult


class Strategy(str, Enum):
    """How a result's recommendations should be produced."""

    SKIP = "skip"  # No recommendations needed
    AUTO = "auto"  # Template-based recommendations
    AI_CANDIDATE = "ai_candidate"  # Worth a completion request


@dataclass(frozen=True)
class ClassificationSignals:
    """Scores the classifier computed for one result."""

    complexity_score: int
    severity_score: int
    has_interesting_patterns: bool
    is_managed_component: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "complexity_score": self.complexity_score,
            "severity_score": self.severity_score,
            "has_interesting_patterns": self.has_interesting_patterns,
            "is_managed_component": self.is_managed_component,
        }


@dataclass
class ClassificationResult:
    """Results partitioned into the three strategy buckets.

    ``failed`` holds results whose classification raised; they belong to
    no strategy bucket and receive the fallback recommendations.
    """

    ai_candidates: List[AnalysisResult] = field(default_factory=list)
    auto: List[AnalysisResult] = field(default_factory=list)
    skipped: List[AnalysisResult] = field(default_factory=list)
    failed: List[AnalysisResult] = field(default_factory=list)

    def bucket(self, strategy: Strategy) -> List[AnalysisResult]:
        """Return the bucket list for ``strategy``."""
        return {
            Strategy.AI_CANDIDATE: self.ai_candidates,
            Strategy.AUTO: self.auto,
            Strategy.SKIP: self.skipped,
        }[strategy]

    @property
    def total(self) -> int:
        return len(self.ai_candidates) + len(self.auto) + len(self.skipped) + len(self.failed)

    @property
    def total_ai_savings(self) -> int:
        """Results that need no completion request at all."""
        return len(self.auto) + len(self.skipped)

    def ai_reduction_percentage(self, total_files: int) -> float:
        """Share of ``total_files`` kept away from the completion service, in percent."""
        if total_files <= 0:
            return 0.0
        return self.total_ai_savings / total_files * 100

    def counts(self) -> Dict[str, int]:
        return {
            "ai_candidates": len(self.ai_candidates),
            "auto": len(self.auto),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }
