"""Generic bounded cache with per-entry TTL and lazy eviction."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


def system_clock_ms() -> float:
    """Default clock: wall time in milliseconds."""
    return time.time() * 1000


@dataclass
class CacheEntry(Generic[T]):
    """A cached value with its write time and TTL (clock units)."""

    key: str
    value: T
    written_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now >= self.written_at + self.ttl


class BoundedCache(Generic[T]):
    """Thread-safe cache with max size and per-entry TTL.

    Expired entries are only removed when they are read; there is no sweeper.
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: float = 300_000,
        clock: Clock | None = None,
    ):
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._clock = clock or system_clock_ms
        self._cache: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expired(self._clock()):
                del self._cache[key]
                self._misses += 1
                return None
            self._hits += 1
            return entry

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        with self._lock:
            if len(self._cache) >= self._max_size and key not in self._cache:
                oldest_key = min(self._cache, key=lambda k: self._cache[k].written_at)
                del self._cache[oldest_key]
            self._cache[key] = CacheEntry(
                key=key,
                value=value,
                written_at=self._clock(),
                ttl=self._default_ttl if ttl is None else ttl,
            )

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def record_corruption(self, key: str) -> None:
        """Evict an entry that failed validation and count the read as a miss."""
        with self._lock:
            self._cache.pop(key, None)
            self._hits = max(0, self._hits - 1)
            self._misses += 1

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 2) if total > 0 else 0.0,
                "max_size": self._max_size,
                "default_ttl_ms": self._default_ttl,
            }
