"""Upstream call execution with timeouts and retries."""

from travel_info.exec.retry import fetch_with_retry
from travel_info.exec.types import ResponseValidator, RetryPolicy, SleepFunc

__all__ = [
    "fetch_with_retry",
    "ResponseValidator",
    "RetryPolicy",
    "SleepFunc",
]
