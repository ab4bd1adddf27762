"""Optimization workflow orchestration."""

from .analysis import Analyzer, analyze_source, run_analyzers
from .orchestrator import RecommendationOptimizer

__all__ = [
    "Analyzer",
    "RecommendationOptimizer",
    "analyze_source",
    "run_analyzers",
]
