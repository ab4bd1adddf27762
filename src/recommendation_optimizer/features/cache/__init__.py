"""Recommendation pattern cache feature."""

from .context import context_from_result, detect_framework_family, is_context_compatible
from .pattern_cache import DisabledCache, PatternCache, RecommendationCache
from .signature import issue_signature, normalize_description, pattern_key

__all__ = [
    "DisabledCache",
    "PatternCache",
    "RecommendationCache",
    "context_from_result",
    "detect_framework_family",
    "is_context_compatible",
    "issue_signature",
    "normalize_description",
    "pattern_key",
]
