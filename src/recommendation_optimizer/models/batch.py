"""Data models for batched completion requests."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .analysis import AnalysisResult, Recommendation


@dataclass
class Batch:
    """A group of results sent to the completion service in one request.

    The running totals exist only to enforce the packing limits.
    """

    results: List[AnalysisResult] = field(default_factory=list)
    issue_count: int = 0
    estimated_prompt_length: int = 0

    @property
    def item_count(self) -> int:
        return len(self.results)

    def add(self, result: AnalysisResult, prompt_contribution: int) -> None:
        """Append a result and update the running totals."""
        self.results.append(result)
        self.issue_count += len(result.issues)
        self.estimated_prompt_length += prompt_contribution


@dataclass
class BatchOutcome:
    """Outcome of one completion request.

    Exactly one of ``recommendations`` and ``error`` is meaningful:
    on success ``recommendations`` maps each result's position in the
    batch to its parsed recommendations, on failure ``error`` holds the
    reason and every result gets the fallback.
    """

    recommendations: Dict[int, List[Recommendation]] = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, recommendations: Dict[int, List[Recommendation]]) -> "BatchOutcome":
        return cls(recommendations=recommendations)

    @classmethod
    def failure(cls, error: Exception) -> "BatchOutcome":
        return cls(error=error)
