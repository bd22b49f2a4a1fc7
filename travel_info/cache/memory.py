"""In-memory TTL cache with bounded size and a periodic sweep."""

import asyncio
import contextlib
import copy
import json
import logging
import threading
from typing import Any

from travel_info.cache.config import (
    MEMORY_CACHE_DEFAULTS,
    calculate_hit_rate,
    pattern_to_regex,
)
from travel_info.cache.types import CacheEntry, CacheStats, Clock, now_ms

logger = logging.getLogger(__name__)


class MemoryCache:
    """Process-wide in-memory cache.

    Writes are atomic per key (last writer wins). Readers never delete;
    expired entries read as misses and are purged by ``cleanup``. When full,
    the oldest stored entry is evicted.
    """

    def __init__(
        self,
        max_entries: int = MEMORY_CACHE_DEFAULTS["max_entries"],
        default_ttl_ms: int = MEMORY_CACHE_DEFAULTS["default_ttl_ms"],
        cleanup_interval_s: float = MEMORY_CACHE_DEFAULTS["cleanup_interval_ms"] / 1000,
        clock: Clock | None = None,
    ) -> None:
        """Initialize cache.

        Args:
            max_entries: Capacity before oldest-first eviction.
            default_ttl_ms: TTL used when ``set`` is given none.
            cleanup_interval_s: Interval of the background sweep.
            clock: Returns epoch milliseconds; injectable for tests.
        """
        self.max_entries = max_entries
        self.default_ttl_ms = default_ttl_ms
        self.cleanup_interval_s = cleanup_interval_s
        self._clock = clock or now_ms
        # Insertion order == storage order; every write re-inserts at the end
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._sweep_task: asyncio.Task[None] | None = None

    def get(self, key: str) -> CacheEntry | None:
        """Return a copy of the entry, or None when missing or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired(self._clock()):
                self._misses += 1
                return None
            self._hits += 1
            return entry.model_copy(deep=True)

    def set(self, key: str, data: Any, ttl_seconds: float | None = None) -> None:
        """Store a copy of ``data``, overwriting any previous entry."""
        ttl_ms = self.default_ttl_ms if ttl_seconds is None else int(ttl_seconds * 1000)
        entry = CacheEntry(data=copy.deepcopy(data), stored_at=self._clock(), ttl_ms=ttl_ms)
        self.set_entry(key, entry)

    def set_entry(self, key: str, entry: CacheEntry) -> None:
        """Store an existing entry, keeping its ``stored_at`` and TTL."""
        with self._lock:
            self._store.pop(key, None)
            while len(self._store) >= self.max_entries > 0:
                oldest = next(iter(self._store))
                del self._store[oldest]
                logger.debug("Evicted cache entry", extra={"key": oldest})
            self._store[key] = entry

    def has(self, key: str) -> bool:
        """Check for a live entry without touching hit/miss counters."""
        with self._lock:
            entry = self._store.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def keys(self, pattern: str | None = None) -> list[str]:
        """Live keys, optionally filtered by a ``*`` wildcard pattern."""
        regex = pattern_to_regex(pattern) if pattern else None
        now = self._clock()
        with self._lock:
            return [
                key
                for key, entry in self._store.items()
                if not entry.is_expired(now) and (regex is None or regex.match(key))
            ]

    def invalidate(self, pattern: str) -> int:
        """Delete every key matching the pattern, expired or not."""
        regex = pattern_to_regex(pattern)
        with self._lock:
            matched = [key for key in self._store if regex.match(key)]
            for key in matched:
                del self._store[key]
        return len(matched)

    def cleanup(self) -> int:
        """Remove expired entries.

        Works on a snapshot; an entry rewritten after the snapshot was taken
        is a different object and survives.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            snapshot = list(self._store.items())
        now = self._clock()
        expired = [(key, entry) for key, entry in snapshot if entry.is_expired(now)]

        removed = 0
        with self._lock:
            for key, entry in expired:
                if self._store.get(key) is entry:
                    del self._store[key]
                    removed += 1
        if removed:
            logger.debug("Cache sweep removed %d entries", removed)
        return removed

    def stats(self) -> CacheStats:
        with self._lock:
            entries = list(self._store.items())
            hits, misses = self._hits, self._misses

        stored = [entry.stored_at for _, entry in entries]
        return CacheStats(
            hits=hits,
            misses=misses,
            size=len(entries),
            oldest_entry=min(stored) if stored else None,
            newest_entry=max(stored) if stored else None,
            hit_rate=calculate_hit_rate(hits, misses),
            estimated_memory_bytes=sum(_estimate_size(k, e) for k, e in entries),
        )

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Stop the periodic sweep."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval_s)
            self.cleanup()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


def _estimate_size(key: str, entry: CacheEntry) -> int:
    """Rough UTF-16 size of the key and serialized payload."""
    payload = json.dumps(entry.data, default=str, ensure_ascii=False)
    return (len(key) + len(payload)) * 2
