"""Tests for the two-tier cache manager."""

import asyncio
from unittest.mock import patch

import pytest

from travel_info.cache.file import FileCache
from travel_info.cache.manager import CacheManager
from travel_info.cache.memory import MemoryCache


@pytest.fixture
def manager(tmp_path, clock):
    return CacheManager(MemoryCache(clock=clock), FileCache(tmp_path, clock=clock))


@pytest.mark.asyncio
async def test_set_writes_both_tiers(manager):
    await manager.set("k", {"a": 1}, ttl_seconds=60)

    assert manager.memory.get("k").data == {"a": 1}
    assert manager.file.get("k").data == {"a": 1}


@pytest.mark.asyncio
async def test_file_hit_is_promoted_with_original_timestamps(manager, clock):
    manager.file.set("k", {"a": 1}, ttl_seconds=60)
    stored_at = clock.now_ms
    clock.advance(5_000)

    entry = await manager.get("k")

    assert entry.data == {"a": 1}
    promoted = manager.memory.get("k")
    assert promoted.stored_at == stored_at
    assert promoted.ttl_ms == 60_000


@pytest.mark.asyncio
async def test_expiry_counts_a_miss(manager, clock):
    await manager.set("k", "v", ttl_seconds=1)
    assert await manager.get("k") is not None

    clock.advance(1_001)
    assert await manager.get("k") is None

    stats = manager.stats()
    assert stats.hits == 1
    assert stats.misses == 1
    assert stats.hit_rate == 0.5


@pytest.mark.asyncio
async def test_file_write_failure_is_logged_not_raised(manager):
    with patch.object(manager.file, "set", side_effect=OSError("disk full")):
        await manager.set("k", "v")

    assert manager.memory.get("k").data == "v"


@pytest.mark.asyncio
async def test_invalidate_both_tiers(manager):
    await manager.set("travel-info:paris:safety", 1)
    await manager.set("travel-info:paris:basic", 2)
    await manager.set("travel-info:tokyo:safety", 3)

    removed = await manager.invalidate("travel-info:paris:*")

    assert removed == 2
    assert await manager.keys() == ["travel-info:tokyo:safety"]
    assert manager.file.keys() == ["travel-info:tokyo:safety"]


@pytest.mark.asyncio
async def test_memory_only_manager(clock):
    manager = CacheManager(MemoryCache(clock=clock))
    await manager.set("k", 1)

    assert (await manager.get("k")).data == 1
    assert await manager.delete("k") is True
    assert await manager.get("k") is None


def test_from_settings(settings):
    manager = CacheManager.from_settings(settings)

    assert manager.memory.max_entries == settings.memory_cache_max_entries
    assert manager.file is not None
    assert str(manager.file.cache_dir) == settings.cache_dir


def test_from_settings_without_file_tier(settings):
    settings.file_cache_enabled = False

    assert CacheManager.from_settings(settings).file is None


@pytest.mark.asyncio
async def test_periodic_sweep_purges_both_tiers(tmp_path, clock):
    manager = CacheManager(
        MemoryCache(cleanup_interval_s=0.01, clock=clock), FileCache(tmp_path, clock=clock)
    )
    await manager.set("k", "v", ttl_seconds=1)
    clock.advance(10_000)

    manager.start()
    try:
        for _ in range(100):
            if not list(tmp_path.glob("*.json")):
                break
            await asyncio.sleep(0.01)
    finally:
        await manager.close()

    assert len(manager.memory) == 0
    assert list(tmp_path.glob("*.json")) == []


def test_from_settings_bounds_file_tier(settings):
    settings.file_cache_max_entries = 10

    assert CacheManager.from_settings(settings).file.max_entries == 10
