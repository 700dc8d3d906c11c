"""Fingerprinted TTL cache for verification results."""

import hashlib
import json
import logging
from typing import Any

from src.infrastructure.cache.bounded_cache import BoundedCache, CacheEntry, Clock
from src.services.verification.errors import CacheCorruptionError
from src.services.verification.models import VerificationQuery, VerificationResult

logger = logging.getLogger(__name__)


def fingerprint(query: VerificationQuery) -> str:
    """Canonical, order-independent cache key for a query.

    Only the text and the scope take part; ids, requester and urgency do not.
    """
    payload = {
        "query": query.query,
        "board_id": query.board_id,
        "organization_id": query.organization_id,
        "anonymous_mode": query.anonymous_mode,
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ResultCache:
    """Caches successful verification results keyed by query fingerprint."""

    def __init__(
        self,
        default_ttl: float = 300_000,
        max_size: int = 1000,
        clock: Clock | None = None,
    ):
        self._cache: BoundedCache[VerificationResult] = BoundedCache(
            max_size=max_size, default_ttl=default_ttl, clock=clock,
        )

    def get(self, key: str) -> VerificationResult | None:
        """Return the cached result, or None when missing, expired or corrupted."""
        entry = self._cache.get_entry(key)
        if entry is None:
            return None
        try:
            self._validate(entry)
        except CacheCorruptionError as e:
            logger.warning("[RESULT CACHE] %s; evicting", e)
            self._cache.record_corruption(key)
            return None
        logger.debug("[RESULT CACHE] HIT %s", key[:12])
        return entry.value

    def set(self, key: str, result: VerificationResult, ttl: float | None = None) -> None:
        self._cache.set(key, result, ttl)
        logger.debug("[RESULT CACHE] Stored %s (ttl=%s)", key[:12], ttl)

    def delete(self, key: str) -> bool:
        return self._cache.delete(key)

    def clear(self) -> None:
        self._cache.clear()
        logger.info("[RESULT CACHE] Cleared")

    def get_stats(self) -> dict[str, Any]:
        return self._cache.get_stats()

    @staticmethod
    def _validate(entry: CacheEntry[Any]) -> None:
        value = entry.value
        if not isinstance(value, VerificationResult):
            raise CacheCorruptionError(entry.key, f"unexpected type {type(value).__name__}")
        if not 0 <= value.confidence <= 100:
            raise CacheCorruptionError(entry.key, f"confidence {value.confidence} out of range")
        if value.verified and not value.verification.evidence:
            raise CacheCorruptionError(entry.key, "verified result without evidence")
        if entry.ttl <= 0:
            raise CacheCorruptionError(entry.key, f"non-positive ttl {entry.ttl}")
