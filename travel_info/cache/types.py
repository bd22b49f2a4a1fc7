"""Cache entry and statistics models."""

import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

# Returns epoch milliseconds
Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


class CacheEntry(BaseModel):
    """A cached payload with its storage time and lifetime.

    Times are epoch milliseconds. An entry is expired once
    ``now - stored_at > ttl_ms``.
    """

    data: Any
    stored_at: int = Field(description="Epoch ms when the entry was written")
    ttl_ms: int = Field(ge=0, description="Time-to-live in milliseconds")

    @property
    def expires_at(self) -> int:
        return self.stored_at + self.ttl_ms

    def is_expired(self, now_ms: int) -> bool:
        return now_ms - self.stored_at > self.ttl_ms


class CacheStats(BaseModel):
    """Hit/miss accounting and size of a cache."""

    hits: int = 0
    misses: int = 0
    size: int = 0
    oldest_entry: int | None = Field(default=None, description="Oldest stored_at")
    newest_entry: int | None = Field(default=None, description="Newest stored_at")
    hit_rate: float = 0.0
    estimated_memory_bytes: int = 0
