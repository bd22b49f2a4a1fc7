"""Two-tier cache: in-memory first, file-backed second."""

import asyncio
import contextlib
import logging
import threading
from typing import Any

from travel_info.cache.config import calculate_hit_rate
from travel_info.cache.file import FileCache
from travel_info.cache.memory import MemoryCache
from travel_info.cache.types import CacheEntry, CacheStats
from travel_info.config import Settings

logger = logging.getLogger(__name__)


class CacheManager:
    """Category cache used by the orchestrator.

    Reads check memory, then the file tier; a file hit is promoted to memory
    with its original ``stored_at`` and TTL. Writes go to both tiers. File
    I/O runs in worker threads so it never blocks the event loop, and file
    tier failures are logged rather than raised.
    """

    def __init__(self, memory: MemoryCache, file: FileCache | None = None) -> None:
        self.memory = memory
        self.file = file
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()
        self._sweep_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheManager":
        memory = MemoryCache(
            max_entries=settings.memory_cache_max_entries,
            cleanup_interval_s=settings.cache_cleanup_interval_s,
        )
        file = None
        if settings.file_cache_enabled:
            file = FileCache(
                cache_dir=settings.cache_dir,
                max_entries=settings.file_cache_max_entries,
            )
        return cls(memory, file)

    def _count(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    async def get(self, key: str) -> CacheEntry | None:
        """Look a key up in memory, then on disk."""
        entry = self.memory.get(key)
        if entry is None and self.file is not None:
            try:
                entry = await asyncio.to_thread(self.file.get, key)
            except OSError as e:
                logger.warning("File cache read failed for %s: %s", key, e)
                entry = None
            if entry is not None:
                self.memory.set_entry(key, entry.model_copy(deep=True))

        self._count(entry is not None)
        return entry

    async def set(self, key: str, data: Any, ttl_seconds: float | None = None) -> None:
        """Store in both tiers, overwriting previous entries."""
        self.memory.set(key, data, ttl_seconds)
        if self.file is not None:
            try:
                await asyncio.to_thread(self.file.set, key, data, ttl_seconds)
            except (OSError, TypeError, ValueError) as e:
                logger.warning("File cache write failed for %s: %s", key, e)

    async def delete(self, key: str) -> bool:
        deleted = self.memory.delete(key)
        if self.file is not None:
            deleted = await asyncio.to_thread(self.file.delete, key) or deleted
        return deleted

    async def keys(self, pattern: str | None = None) -> list[str]:
        """Live keys from both tiers, optionally matching a wildcard pattern."""
        keys = set(self.memory.keys(pattern))
        if self.file is not None:
            keys.update(await asyncio.to_thread(self.file.keys, pattern))
        return sorted(keys)

    async def invalidate(self, pattern: str) -> int:
        """Delete matching keys from both tiers.

        Returns:
            Number of distinct keys removed.
        """
        removed = set(self.memory.keys(pattern))
        self.memory.invalidate(pattern)
        if self.file is not None:
            removed.update(await asyncio.to_thread(self.file.keys, pattern))
            await asyncio.to_thread(self.file.invalidate, pattern)
        logger.info("Invalidated cache keys", extra={"pattern": pattern, "count": len(removed)})
        return len(removed)

    async def clear(self) -> None:
        self.memory.clear()
        if self.file is not None:
            await asyncio.to_thread(self.file.clear)
        with self._lock:
            self._hits = 0
            self._misses = 0

    async def cleanup(self) -> int:
        removed = self.memory.cleanup()
        if self.file is not None:
            removed += await asyncio.to_thread(self.file.cleanup)
        return removed

    def stats(self) -> CacheStats:
        """Manager-level hit/miss counts with the memory tier's size."""
        memory_stats = self.memory.stats()
        with self._lock:
            hits, misses = self._hits, self._misses
        return memory_stats.model_copy(
            update={
                "hits": hits,
                "misses": misses,
                "hit_rate": calculate_hit_rate(hits, misses),
            }
        )

    def start(self) -> None:
        """Start the periodic sweep of both tiers on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())

    async def close(self) -> None:
        """Stop the periodic sweep."""
        task, self._sweep_task = self._sweep_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.memory.stop()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.memory.cleanup_interval_s)
            try:
                removed = await self.cleanup()
            except OSError as e:
                logger.warning("Cache sweep failed: %s", e)
                continue
            if removed:
                logger.debug("Cache sweep removed %d entries", removed)
