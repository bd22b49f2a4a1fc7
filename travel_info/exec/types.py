"""Type definitions for upstream call execution."""

from collections.abc import Awaitable, Callable

import httpx
from pydantic import BaseModel, Field

# Sleep callable, injectable so tests never wait on backoff
SleepFunc = Callable[[float], Awaitable[None]]

# Raises InvalidResponseError when a payload has the wrong shape
ResponseValidator = Callable[[httpx.Response], None]


class RetryPolicy(BaseModel):
    """Policy for retrying transient upstream failures."""

    max_retries: int = Field(default=2, ge=0, description="Retries after the first attempt")
    base_delay_s: float = Field(
        default=1.0, ge=0, description="Backoff before retry n is base_delay_s * n"
    )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-based)."""
        return self.base_delay_s * attempt
