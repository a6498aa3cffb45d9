"""Memoization of completed integrations with LRU and TTL eviction."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from .quadrature import IntegrationResult


class CacheKey(NamedTuple):
    expression: str
    t1: float
    t2: float
    steps: int
    method: str


class ResultCache:
    """Thread-safe in-memory cache of integration results.

    Entries are evicted least-recently-used first once ``max_entries`` is
    reached, and expire ``ttl_seconds`` after insertion when a TTL is set.
    """

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max(1, int(max_entries))
        self.ttl_seconds = None if ttl_seconds is None else max(0.0, float(ttl_seconds))
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, Tuple[float, IntegrationResult]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired_locked(self, stored_at: float, now: float) -> bool:
        return self.ttl_seconds is not None and now - stored_at >= self.ttl_seconds

    def get(self, key: CacheKey) -> Optional[IntegrationResult]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            stored_at, result = entry
            if self._expired_locked(stored_at, now):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return result

    def put(self, key: CacheKey, result: IntegrationResult) -> None:
        now = self._clock()
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = (now, result)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                self._evictions += 1

    def get_or_compute(self, key: CacheKey, compute_fn: Callable[[], IntegrationResult]) -> IntegrationResult:
        """Returns the cached result for ``key`` or computes and stores it.

        Exceptions raised by ``compute_fn`` propagate and leave the cache
        untouched. Two concurrent misses on the same key may both compute.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        result = compute_fn()
        self.put(key, result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
