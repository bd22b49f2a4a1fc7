"""Metrics façade for source call tracking."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from travel_info.errors import ErrorKind

logger = logging.getLogger(__name__)


def record_source_call(
    source: str,
    latency_ms: int,
    ok: bool,
    from_cache: bool,
    retries: int,
    error_kind: "ErrorKind | None",
) -> None:
    """Record metrics for one upstream fetch or cache lookup.

    Emits a structured log record; a metrics backend can consume it from
    the log pipeline.

    Args:
        source: Name of the source or category that was called.
        latency_ms: Latency in milliseconds.
        ok: Whether the call succeeded.
        from_cache: Whether the result came from cache.
        retries: Number of retries performed.
        error_kind: Type of error if call failed, None if succeeded.
    """
    logger.info(
        "source_call_metric",
        extra={
            "source": source,
            "latency_ms": latency_ms,
            "ok": ok,
            "from_cache": from_cache,
            "retries": retries,
            "error_kind": error_kind.value if error_kind else None,
        },
    )
