"""Data models for the recommendation optimizer."""

from recommendation_optimizer.models.analysis import (
    AnalysisResult,
    Issue,
    IssueSeverity,
    Recommendation,
    RecommendationEffort,
    RecommendationPriority,
    Resolution,
    SourceFile,
)
from recommendation_optimizer.models.batch import (
    Batch,
    BatchOutcome,
)
from recommendation_optimizer.models.cache import (
    CacheEntry,
    CacheStatistics,
    ContextMetadata,
)
from recommendation_optimizer.models.classification import (
    ClassificationResult,
    ClassificationSignals,
    Strategy,
)
from recommendation_optimizer.models.statistics import (
    OptimizationRun,
    OptimizationStatistics,
)

__all__ = [
    # Analysis
    "AnalysisResult",
    "Issue",
    "IssueSeverity",
    "Recommendation",
    "RecommendationEffort",
    "RecommendationPriority",
    "Resolution",
    "SourceFile",
    # Batching
    "Batch",
    "BatchOutcome",
    # Cache
    "CacheEntry",
    "CacheStatistics",
    "ContextMetadata",
    # Classification
    "ClassificationResult",
    "ClassificationSignals",
    "Strategy",
    # Statistics
    "OptimizationRun",
    "OptimizationStatistics",
]
