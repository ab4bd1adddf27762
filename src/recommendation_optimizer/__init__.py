"""Recommendation optimizer.

Attaches recommendations to concurrency-analysis results while issuing
far fewer completion-service requests than one per analyzed file.
"""

from recommendation_optimizer.core.config import OptimizerConfig
from recommendation_optimizer.features.batching import BatchScheduler
from recommendation_optimizer.features.cache import PatternCache
from recommendation_optimizer.features.classification import ResultClassifier
from recommendation_optimizer.features.completion import CompletionService, HttpCompletionService
from recommendation_optimizer.features.orchestration import RecommendationOptimizer

__version__ = "0.1.0"

__all__ = [
    "BatchScheduler",
    "CompletionService",
    "HttpCompletionService",
    "OptimizerConfig",
    "PatternCache",
    "RecommendationOptimizer",
    "ResultClassifier",
]
