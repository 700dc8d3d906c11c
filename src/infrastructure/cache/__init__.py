"""Cache infrastructure module."""

from src.infrastructure.cache.bounded_cache import BoundedCache, CacheEntry
from src.infrastructure.cache.inflight import InFlightRegistry
from src.infrastructure.cache.result_cache import ResultCache, fingerprint

__all__ = [
    "BoundedCache",
    "CacheEntry",
    "InFlightRegistry",
    "ResultCache",
    "fingerprint",
]
