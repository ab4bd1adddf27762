"""Data models for the recommendation pattern cache."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .analysis import Recommendation


@dataclass(frozen=True)
class ContextMetadata:
    """Coarse fingerprint of a file's surroundings.

    Only used to refuse cache reuse across incompatible contexts;
    it never changes the recommendations themselves.

    Attributes:
        framework_family: SPRING, CDI, REACTIVE or STANDARD
        class_count: Number of classes in the file (0 when unknown)
    """

    framework_family: str = "STANDARD"
    class_count: int = 0


@dataclass
class CacheEntry:
    """Recommendations stored under one pattern key."""

    recommendations: List[Recommendation]
    created_at: float
    context: ContextMetadata = field(default_factory=ContextMetadata)


@dataclass(frozen=True)
class CacheStatistics:
    """Snapshot of pattern cache counters.

    Attributes:
        hits: Lookups served from the cache
        misses: Lookups that found nothing usable
        total_requests: All lookups, including trivial empty-issue ones
        hit_rate: ``hits / total_requests`` as a percentage
        size: Entries currently stored
    """

    hits: int = 0
    misses: int = 0
    total_requests: int = 0
    hit_rate: float = 0.0
    size: int = 0

    def summary(self) -> str:
        return f"{self.hits} hits, {self.misses} misses, {self.hit_rate:.1f}% hit rate, {self.size} entries"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.total_requests,
            "hit_rate": round(self.hit_rate, 1),
            "size": self.size,
        }
