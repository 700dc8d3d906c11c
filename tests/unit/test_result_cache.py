"""Tests for the bounded cache, result cache and fingerprinting."""

from src.infrastructure.cache.bounded_cache import BoundedCache
from src.infrastructure.cache.result_cache import ResultCache, fingerprint
from tests.helpers import FakeClock, make_query, make_result


# ==========================================
#  FINGERPRINT
# ==========================================


def test_fingerprint_ignores_ids_and_requester():
    a = make_query("q1", requester_id="alice", urgency="high")
    b = make_query("q2", requester_id="bob", urgency="low")
    assert fingerprint(a) == fingerprint(b)


def test_fingerprint_depends_on_scope_and_anonymity():
    base = make_query()
    assert fingerprint(base) != fingerprint(make_query(board_id="med-licenses"))
    assert fingerprint(base) != fingerprint(make_query(organization_id="org-uni"))
    assert fingerprint(base) != fingerprint(make_query(anonymous_mode=True))
    assert fingerprint(base) != fingerprint(make_query(text="Jane Roe"))


def test_fingerprint_is_sha256_hex():
    key = fingerprint(make_query())
    assert len(key) == 64
    int(key, 16)


# ==========================================
#  BOUNDED CACHE
# ==========================================


def test_bounded_cache_evicts_oldest_when_full():
    clock = FakeClock()
    cache = BoundedCache(max_size=2, default_ttl=1000, clock=clock)
    cache.set("a", 1)
    clock.advance(1)
    cache.set("b", 2)
    clock.advance(1)
    cache.set("c", 3)
    assert cache.get_entry("a") is None
    assert cache.get_entry("b").value == 2
    assert cache.get_entry("c").value == 3
    assert len(cache) == 2


def test_bounded_cache_stats():
    cache = BoundedCache(max_size=10, default_ttl=1000, clock=FakeClock())
    cache.set("a", 1)
    cache.get_entry("a")
    cache.get_entry("missing")
    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 50.0


# ==========================================
#  RESULT CACHE
# ==========================================


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = ResultCache(default_ttl=300_000, clock=clock)
    cache.set("k", make_result("q1", True, 87), ttl=100)

    clock.advance(50)
    assert cache.get("k") is not None

    clock.advance(100)
    assert cache.get("k") is None
    # Evicted lazily on that read
    assert cache.get_stats()["size"] == 0


def test_default_ttl_applies():
    clock = FakeClock()
    cache = ResultCache(default_ttl=1000, clock=clock)
    cache.set("k", make_result("q1", True, 87))
    clock.advance(999)
    assert cache.get("k") is not None
    clock.advance(1)
    assert cache.get("k") is None


def test_wrong_type_is_treated_as_miss():
    cache = ResultCache(clock=FakeClock())
    cache._cache.set("k", {"verified": True})
    assert cache.get("k") is None
    stats = cache.get_stats()
    assert stats["size"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 1


def test_out_of_range_confidence_is_evicted():
    cache = ResultCache(clock=FakeClock())
    corrupted = make_result("q1", False, 50).model_copy(update={"confidence": 150})
    cache.set("k", corrupted)
    assert cache.get("k") is None
    assert cache.get_stats()["size"] == 0


def test_verified_without_evidence_is_evicted():
    cache = ResultCache(clock=FakeClock())
    cache.set("k", make_result("q1", True, 90))
    assert cache.get("k") is None


def test_delete_and_clear():
    cache = ResultCache(clock=FakeClock())
    cache.set("a", make_result("q1", False, 10))
    cache.set("b", make_result("q2", False, 20))
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert cache.get("b") is None
