"""Pattern cache for completion-service recommendations.

Recommendations obtained for one file are reused for any later file
whose issue set normalizes to the same pattern key, as long as the
entry is fresh and the two files share a compatible context.
"""
import threading
import time
from typing import Callable, Dict, List, Optional, Protocol

from ...constants import CacheDefaults
from ...core.logging import get_logger
from ...models.analysis import Issue, Recommendation
from ...models.cache import CacheEntry, CacheStatistics, ContextMetadata
from .context import is_context_compatible
from .signature import pattern_key

Clock = Callable[[], float]


class RecommendationCache(Protocol):
    """Port the orchestrator uses to reuse recommendations."""

    def get(self, context: ContextMetadata, issues: List[Issue]) -> Optional[List[Recommendation]]:
        ...

    def put(self, context: ContextMetadata, issues: List[Issue], recommendations: List[Recommendation]) -> None:
        ...

    def stats(self) -> CacheStatistics:
        ...

    def clear(self) -> None:
        ...


class PatternCache:
    """Thread-safe recommendation cache keyed by normalized issue patterns.

    Entries expire for reads after ``ttl_seconds``. Once the cache holds
    more than ``max_size`` entries, the write that crossed the limit
    sweeps out every entry older than ``sweep_age_seconds``.
    """

    def __init__(
        self,
        ttl_seconds: int = CacheDefaults.TTL_SECONDS,
        sweep_age_seconds: int = CacheDefaults.SWEEP_AGE_SECONDS,
        max_size: int = CacheDefaults.MAX_SIZE,
        clock: Clock = time.time
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum age of an entry served by ``get``
            sweep_age_seconds: Age beyond which the size-triggered sweep removes entries
            max_size: Entry count above which ``put`` sweeps
            clock: Returns the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.sweep_age_seconds = sweep_age_seconds
        self.max_size = max_size
        self.clock = clock
        self.entries: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0
        self.total_requests = 0
        self._lock = threading.RLock()
        self.logger = get_logger("cache.pattern_cache")

    def get(self, context: ContextMetadata, issues: List[Issue]) -> Optional[List[Recommendation]]:
        """Get cached recommendations for an issue set.

        Args:
            context: Context of the requesting file
            issues: Issues of the requesting file

        Returns:
            Deep copy of the cached recommendations, ``[]`` for an empty
            issue set, or None when nothing usable is cached
        """
        with self._lock:
            self.total_requests += 1

            if not issues:
                return []

            key = pattern_key(issues)
            entry = self.entries.get(key)

            if entry is not None and self.clock() - entry.created_at >= self.ttl_seconds:
                del self.entries[key]
                entry = None

            if entry is None or not is_context_compatible(entry.context, context):
                self.misses += 1
                self.logger.debug("cache_miss", pattern_key=key, framework=context.framework_family)
                return None

            self.hits += 1
            self.logger.debug("cache_hit", pattern_key=key, framework=context.framework_family)
            return [rec.copy() for rec in entry.recommendations]

    def put(self, context: ContextMetadata, issues: List[Issue], recommendations: List[Recommendation]) -> None:
        """Store recommendations for an issue set.

        Does nothing when either list is empty. Overwrites any entry
        already stored under the same pattern key.

        Args:
            context: Context of the file the recommendations were made for
            issues: Issues of that file
            recommendations: Recommendations to reuse
        """
        if not issues or not recommendations:
            return

        key = pattern_key(issues)
        entry = CacheEntry(
            recommendations=[rec.copy() for rec in recommendations],
            created_at=self.clock(),
            context=context,
        )

        with self._lock:
            self.entries[key] = entry
            self.logger.debug("recommendations_cached", pattern_key=key, count=len(recommendations))

            if len(self.entries) > self.max_size:
                self._sweep()

    def _sweep(self) -> int:
        cutoff = self.clock() - self.sweep_age_seconds
        stale = [key for key, entry in self.entries.items() if entry.created_at < cutoff]
        for key in stale:
            del self.entries[key]

        if stale:
            self.logger.info("cache_entries_evicted", removed=len(stale), remaining=len(self.entries))
        return len(stale)

    def stats(self) -> CacheStatistics:
        """Get a consistent snapshot of the cache counters."""
        with self._lock:
            hit_rate = self.hits / self.total_requests * 100 if self.total_requests > 0 else 0.0
            return CacheStatistics(
                hits=self.hits,
                misses=self.misses,
                total_requests=self.total_requests,
                hit_rate=hit_rate,
                size=len(self.entries),
            )

    def clear(self) -> None:
        """Remove every entry and reset the counters."""
        with self._lock:
            self.entries.clear()
            self.hits = 0
            self.misses = 0
            self.total_requests = 0
        self.logger.info("cache_cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self.entries)


class DisabledCache:
    """Cache stand-in used when caching is switched off; never hits."""

    def __init__(self) -> None:
        self.misses = 0
        self.total_requests = 0
        self._lock = threading.Lock()

    def get(self, context: ContextMetadata, issues: List[Issue]) -> Optional[List[Recommendation]]:
        with self._lock:
            self.total_requests += 1
            if not issues:
                return []
            self.misses += 1
        return None

    def put(self, context: ContextMetadata, issues: List[Issue], recommendations: List[Recommendation]) -> None:
        return None

    def stats(self) -> CacheStatistics:
        with self._lock:
            return CacheStatistics(misses=self.misses, total_requests=self.total_requests)

    def clear(self) -> None:
        with self._lock:
            self.misses = 0
            self.total_requests = 0
