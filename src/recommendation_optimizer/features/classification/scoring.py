"""Score calculation for classification.

This module computes the signals the classifier decides on: a capped
complexity score, a weighted severity score and whether any issue type
is one of the subtle patterns that benefit most from AI analysis.
"""
from collections import Counter
from typing import FrozenSet, List

from ...constants import ClassificationDefaults, IssueTypes
from ...models.analysis import Issue

DEADLOCK_TYPES: FrozenSet[str] = frozenset({IssueTypes.DEADLOCK_RISK, IssueTypes.LOCK_ORDERING})
RACE_TYPES: FrozenSet[str] = frozenset({IssueTypes.RACE_CONDITION})
RESOURCE_LEAK_TYPES: FrozenSet[str] = frozenset({IssueTypes.EXECUTOR_NOT_SHUTDOWN})
UNSAFE_COLLECTION_TYPES: FrozenSet[str] = frozenset({IssueTypes.UNSAFE_COLLECTION})

INTERESTING_PATTERN_TYPES: FrozenSet[str] = frozenset({
    IssueTypes.DEADLOCK_RISK,           # Lock ordering across call paths
    IssueTypes.DOUBLE_CHECKED_LOCKING,  # Subtle implementation pattern
    IssueTypes.UNSAFE_PUBLICATION,      # Object lifecycle
    IssueTypes.COMPARE_AND_SWAP,        # Advanced atomic operations
    IssueTypes.LOCK_ORDERING,
})


class ClassificationScoreCalculator:
    """Calculates the scores used to pick a recommendation strategy."""

    def calculate_complexity_score(self, issues: List[Issue]) -> int:
        """Calculate the complexity score, capped at 10.

        - 2 points per distinct issue type
        - +5 when a deadlock-class and a race-class type co-occur
        - +3 when a resource-leak-class and an unsafe-collection-class type co-occur
        - +count for every type seen more than once

        Args:
            issues: Issues of one file

        Returns:
            Complexity score (0-10)
        """
        type_counts = Counter(issue.type for issue in issues)
        issue_types = set(type_counts)

        score = len(issue_types) * ClassificationDefaults.DISTINCT_TYPE_WEIGHT

        if issue_types & DEADLOCK_TYPES and issue_types & RACE_TYPES:
            score += ClassificationDefaults.DEADLOCK_RACE_BONUS

        if issue_types & RESOURCE_LEAK_TYPES and issue_types & UNSAFE_COLLECTION_TYPES:
            score += ClassificationDefaults.LEAK_COLLECTION_BONUS

        # Repeated types suggest a systematic problem
        for count in type_counts.values():
            if count > 1:
                score += count

        return min(score, ClassificationDefaults.COMPLEXITY_CAP)

    def calculate_severity_score(self, issues: List[Issue]) -> int:
        """Sum of severity weights (CRITICAL=4, HIGH=3, MEDIUM=2, LOW=1)."""
        return sum(issue.severity.weight for issue in issues)

    def has_interesting_patterns(self, issues: List[Issue]) -> bool:
        return any(issue.type in INTERESTING_PATTERN_TYPES for issue in issues)
