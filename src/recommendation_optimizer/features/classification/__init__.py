"""Result classification feature."""

from .classifier import (
    ManagedComponentPredicate,
    ResultClassifier,
    filename_heuristic,
    make_managed_component_predicate,
)
from .scoring import ClassificationScoreCalculator
from .templates import fallback_recommendations, template_recommendation, template_recommendations

__all__ = [
    "ClassificationScoreCalculator",
    "ManagedComponentPredicate",
    "ResultClassifier",
    "fallback_recommendations",
    "filename_heuristic",
    "make_managed_component_predicate",
    "template_recommendation",
    "template_recommendations",
]
