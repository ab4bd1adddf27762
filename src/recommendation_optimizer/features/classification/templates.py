"""Template recommendations for results that do not need AI analysis."""

from typing import Dict, List

from ...constants import IssueTypes
from ...models.analysis import (
    AnalysisResult,
    Issue,
    Recommendation,
    RecommendationEffort,
    RecommendationPriority,
)

TEMPLATE_DESCRIPTIONS: Dict[str, str] = {
    IssueTypes.UNSAFE_COLLECTION:
        "Replace HashMap/ArrayList with ConcurrentHashMap/Collections.synchronizedList() for thread safety",
    IssueTypes.ATOMIC_OPPORTUNITY:
        "Replace int/long counters with AtomicInteger/AtomicLong for thread-safe operations",
    IssueTypes.EXECUTOR_NOT_SHUTDOWN:
        "Add @PreDestroy method or try-with-resources to properly shutdown ExecutorService",
    IssueTypes.RACE_CONDITION:
        "Add proper synchronization (synchronized blocks, volatile, or atomic operations)",
}

EFFORT_BY_TYPE: Dict[str, RecommendationEffort] = {
    IssueTypes.ATOMIC_OPPORTUNITY: RecommendationEffort.SMALL,
    IssueTypes.UNSAFE_COLLECTION: RecommendationEffort.SMALL,
    IssueTypes.RACE_CONDITION: RecommendationEffort.MEDIUM,
    IssueTypes.EXECUTOR_NOT_SHUTDOWN: RecommendationEffort.MEDIUM,
    IssueTypes.DEADLOCK_RISK: RecommendationEffort.LARGE,
    IssueTypes.DOUBLE_CHECKED_LOCKING: RecommendationEffort.LARGE,
}


def template_recommendation(issue: Issue) -> Recommendation:
    """Build the template recommendation for a single issue.

    Priority mirrors the issue severity; effort comes from the issue type.
    """
    description = TEMPLATE_DESCRIPTIONS.get(issue.type, f"Review and address: {issue.description}")
    return Recommendation(
        description=description,
        priority=RecommendationPriority.from_severity(issue.severity),
        effort=EFFORT_BY_TYPE.get(issue.type, RecommendationEffort.MEDIUM),
    )


def template_recommendations(result: AnalysisResult) -> List[Recommendation]:
    """One template recommendation per issue of ``result``, in issue order."""
    return [template_recommendation(issue) for issue in result.issues]


def fallback_recommendations(result: AnalysisResult) -> List[Recommendation]:
    """Generic recommendations used when a completion batch fails."""
    return [
        Recommendation(
            description=f"Review and fix: {issue.description}",
            priority=RecommendationPriority.MEDIUM,
            effort=RecommendationEffort.MEDIUM,
        )
        for issue in result.issues
    ]
