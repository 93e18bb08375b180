"""
In-memory key-value store for employee data.

Holds the full employee list and per-ID lookups so that repeated queries do
not hit the upstream service. The store is injected into the business layer
and is safe for concurrent use from multiple in-flight requests.
"""

import logging
import math
import threading
from typing import Any, Dict, Optional

from cachetools import Cache, LRUCache  # type: ignore[import-untyped]

from ..metrics import cache_operations_total

logger = logging.getLogger(__name__)

ALL_EMPLOYEES_KEY = "employees:all"


def employee_key(employee_id: str) -> str:
    """Cache key for a single employee lookup."""
    return f"employee:{employee_id}"


class EmployeeCache:
    """
    Thread-safe in-memory employee cache.

    Entries carry no TTL and persist until invalidated. With ``max_size``
    unset the store is unbounded; with a size it evicts least recently used
    entries.

    Attributes:
        cache: Underlying cachetools store
        max_size: Maximum number of entries, None for unbounded
        hits: Number of cache hits
        misses: Number of cache misses
    """

    def __init__(self, max_size: Optional[int] = None):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries (None keeps it unbounded)
        """
        self.max_size = max_size
        self.cache: Cache = (
            Cache(maxsize=math.inf) if max_size is None else LRUCache(maxsize=max_size)
        )
        self._lock = threading.RLock()

        # Statistics
        self.hits = 0
        self.misses = 0

        logger.info(
            f"Initialized EmployeeCache with max_size="
            f"{'unbounded' if max_size is None else max_size}"
        )

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Cached value, or None on a miss
        """
        with self._lock:
            value = self.cache.get(key)

            if value is None:
                self.misses += 1
                cache_operations_total.labels(result="miss").inc()
                logger.debug(f"Cache MISS: {key}")
                return None

            self.hits += 1
            cache_operations_total.labels(result="hit").inc()
            logger.debug(f"Cache HIT: {key}")
            return value

    def set(self, key: str, value: Any) -> None:
        """Store a value under ``key``, replacing any previous entry."""
        with self._lock:
            self.cache[key] = value
            logger.debug(f"Cached: {key}")

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            if self.cache.pop(key, None) is not None:
                logger.debug(f"Deleted from cache: {key}")

    def clear(self) -> None:
        """Clear all items from cache."""
        with self._lock:
            count = len(self.cache)
            self.cache.clear()
            logger.info(f"Cleared {count} items from cache")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        with self._lock:
            total_requests = self.hits + self.misses
            hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

            return {
                "size": len(self.cache),
                "max_size": self.max_size,
                "hits": self.hits,
                "misses": self.misses,
                "total_requests": total_requests,
                "hit_rate_percent": int(round(hit_rate)),
            }
