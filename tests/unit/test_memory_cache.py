"""Tests for the in-memory cache tier."""

import asyncio

import pytest

from travel_info.cache.memory import MemoryCache
from travel_info.cache.types import CacheEntry


def test_set_then_get_returns_value(clock):
    cache = MemoryCache(clock=clock)
    cache.set("k", {"level": 1}, ttl_seconds=60)

    entry = cache.get("k")

    assert entry is not None
    assert entry.data == {"level": 1}
    assert entry.stored_at == clock.now_ms
    assert entry.ttl_ms == 60_000


def test_expired_entry_is_a_miss(clock):
    cache = MemoryCache(clock=clock)
    cache.set("k", {"level": 1}, ttl_seconds=60)

    clock.advance(60_000)
    assert cache.get("k") is not None

    clock.advance(1)
    assert cache.get("k") is None

    stats = cache.stats()
    assert stats.hits == 1
    assert stats.misses == 1


def test_readers_do_not_purge_expired_entries(clock):
    cache = MemoryCache(clock=clock)
    cache.set("k", "v", ttl_seconds=1)
    clock.advance(5_000)

    assert cache.get("k") is None
    assert len(cache) == 1

    assert cache.cleanup() == 1
    assert len(cache) == 0


def test_reads_return_copies(clock):
    cache = MemoryCache(clock=clock)
    payload = {"warnings": ["a"]}
    cache.set("k", payload)
    payload["warnings"].append("mutated")

    first = cache.get("k")
    first.data["warnings"].append("also mutated")

    assert cache.get("k").data == {"warnings": ["a"]}


def test_set_overwrites(clock):
    cache = MemoryCache(clock=clock)
    cache.set("k", 1)
    clock.advance(10)
    cache.set("k", 2)

    entry = cache.get("k")
    assert entry.data == 2
    assert entry.stored_at == clock.now_ms
    assert len(cache) == 1


def test_default_ttl_is_used_without_ttl(clock):
    cache = MemoryCache(default_ttl_ms=5_000, clock=clock)
    cache.set("k", 1)
    assert cache.get("k").ttl_ms == 5_000


def test_evicts_oldest_stored_when_full(clock):
    cache = MemoryCache(max_entries=2, clock=clock)
    cache.set("a", 1)
    clock.advance(1)
    cache.set("b", 2)
    clock.advance(1)
    cache.set("c", 3)

    assert cache.get("a") is None
    assert cache.get("b").data == 2
    assert cache.get("c").data == 3


def test_rewrite_moves_entry_to_newest(clock):
    cache = MemoryCache(max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.has("a")
    assert not cache.has("b")


def test_keys_and_invalidate_with_patterns(clock):
    cache = MemoryCache(clock=clock)
    cache.set("travel-info:paris:safety", 1)
    cache.set("travel-info:paris:basic", 2)
    cache.set("travel-info:tokyo:safety", 3)

    assert sorted(cache.keys("travel-info:paris:*")) == [
        "travel-info:paris:basic",
        "travel-info:paris:safety",
    ]
    assert sorted(cache.keys("travel-info:*:safety")) == [
        "travel-info:paris:safety",
        "travel-info:tokyo:safety",
    ]

    assert cache.invalidate("travel-info:*:safety") == 2
    assert cache.keys() == ["travel-info:paris:basic"]


def test_cleanup_keeps_entries_rewritten_after_snapshot(clock):
    cache = MemoryCache(clock=clock)
    cache.set("k", "old", ttl_seconds=1)
    clock.advance(2_000)

    def rewrite():
        cache._store["k"] = CacheEntry(data="new", stored_at=clock.now_ms, ttl_ms=60_000)

    cache._store = _RacingStore(cache._store, rewrite)

    assert cache.cleanup() == 0
    assert cache.get("k").data == "new"


class _RacingStore(dict):
    """Dict that runs a write right after the sweep takes its snapshot."""

    def __init__(self, data, on_snapshot):
        super().__init__(data)
        self._on_snapshot = on_snapshot

    def items(self):
        snapshot = list(super().items())
        if self._on_snapshot is not None:
            callback, self._on_snapshot = self._on_snapshot, None
            callback()
        return snapshot


def test_stats(clock):
    cache = MemoryCache(clock=clock)
    cache.set("a", {"x": 1})
    clock.advance(100)
    cache.set("b", {"x": 2})
    cache.get("a")
    cache.get("missing")

    stats = cache.stats()

    assert stats.size == 2
    assert stats.hits == 1
    assert stats.misses == 1
    assert stats.hit_rate == 0.5
    assert stats.oldest_entry == clock.now_ms - 100
    assert stats.newest_entry == clock.now_ms
    assert stats.estimated_memory_bytes > 0


def test_clear_resets_entries_and_counters(clock):
    cache = MemoryCache(clock=clock)
    cache.set("a", 1)
    cache.get("a")
    cache.clear()

    stats = cache.stats()
    assert stats.size == 0
    assert stats.hits == 0


@pytest.mark.asyncio
async def test_background_sweep_removes_expired(clock):
    cache = MemoryCache(cleanup_interval_s=0.01, clock=clock)
    cache.set("k", 1, ttl_seconds=1)
    clock.advance(2_000)

    cache.start()
    try:
        for _ in range(100):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
    finally:
        await cache.stop()

    assert len(cache) == 0
