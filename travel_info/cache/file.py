"""File-backed cache tier.

One JSON document per key under ``cache_dir``. All methods block on disk
I/O; the cache manager calls them through ``asyncio.to_thread``.
"""

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from travel_info.cache.config import FILE_CACHE_DEFAULTS, pattern_to_regex
from travel_info.cache.types import CacheEntry, Clock, now_ms

logger = logging.getLogger(__name__)


class FileCache:
    """Persistent cache storing ``{key, data, stored_at, ttl_ms}`` per file."""

    def __init__(
        self,
        cache_dir: str | Path = FILE_CACHE_DEFAULTS["cache_dir"],
        max_entries: int = FILE_CACHE_DEFAULTS["max_entries"],
        default_ttl_ms: int = FILE_CACHE_DEFAULTS["default_ttl_ms"],
        clock: Clock | None = None,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.max_entries = max_entries
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or now_ms

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def _read(self, path: Path) -> dict[str, Any] | None:
        try:
            with path.open(encoding="utf-8") as f:
                doc = json.load(f)
            CacheEntry(
                data=doc["data"], stored_at=doc["stored_at"], ttl_ms=doc["ttl_ms"]
            )
            if not isinstance(doc.get("key"), str):
                raise ValueError("missing key")
            return doc
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Removing unreadable cache file %s: %s", path.name, e)
            path.unlink(missing_ok=True)
            return None

    def _iter_docs(self):
        if not self.cache_dir.is_dir():
            return
        for path in self.cache_dir.glob("*.json"):
            doc = self._read(path)
            if doc is not None:
                yield path, doc

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry, or None when missing, expired or corrupt."""
        doc = self._read(self._path_for(key))
        if doc is None or doc["key"] != key:
            return None
        entry = CacheEntry(data=doc["data"], stored_at=doc["stored_at"], ttl_ms=doc["ttl_ms"])
        if entry.is_expired(self._clock()):
            return None
        return entry

    def set(self, key: str, data: Any, ttl_seconds: float | None = None) -> None:
        ttl_ms = self.default_ttl_ms if ttl_seconds is None else int(ttl_seconds * 1000)
        self.set_entry(key, CacheEntry(data=data, stored_at=self._clock(), ttl_ms=ttl_ms))

    def set_entry(self, key: str, entry: CacheEntry) -> None:
        """Write atomically: temp file in the same directory, then rename."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        doc = {"key": key, **entry.model_dump(mode="json")}
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False)
            os.replace(tmp_name, self._path_for(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self._enforce_limit(keep=self._path_for(key))

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        existed = path.exists()
        path.unlink(missing_ok=True)
        return existed

    def clear(self) -> None:
        if not self.cache_dir.is_dir():
            return
        for path in self.cache_dir.glob("*.json"):
            path.unlink(missing_ok=True)

    def keys(self, pattern: str | None = None) -> list[str]:
        regex = pattern_to_regex(pattern) if pattern else None
        now = self._clock()
        keys = []
        for _, doc in self._iter_docs():
            if now - doc["stored_at"] > doc["ttl_ms"]:
                continue
            if regex is None or regex.match(doc["key"]):
                keys.append(doc["key"])
        return keys

    def invalidate(self, pattern: str) -> int:
        regex = pattern_to_regex(pattern)
        removed = 0
        for path, doc in list(self._iter_docs()):
            if regex.match(doc["key"]):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    def cleanup(self) -> int:
        """Delete expired files, then the oldest ones beyond ``max_entries``."""
        now = self._clock()
        removed = 0
        for path, doc in list(self._iter_docs()):
            if now - doc["stored_at"] > doc["ttl_ms"]:
                path.unlink(missing_ok=True)
                removed += 1
        return removed + self._enforce_limit()

    def _enforce_limit(self, keep: Path | None = None) -> int:
        if self.max_entries <= 0 or not self.cache_dir.is_dir():
            return 0
        if sum(1 for _ in self.cache_dir.glob("*.json")) <= self.max_entries:
            return 0

        docs = sorted(self._iter_docs(), key=lambda item: item[1]["stored_at"])
        excess = len(docs) - self.max_entries
        removed = 0
        for path, _ in docs:
            if removed >= excess:
                break
            if path == keep:
                continue
            path.unlink(missing_ok=True)
            removed += 1
        if removed:
            logger.debug("File cache evicted %d entries", removed)
        return removed
