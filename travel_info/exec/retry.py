"""HTTP fetch with timeout, bounded retry and linear backoff."""

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from travel_info.errors import ErrorKind, InvalidResponseError, NetworkError
from travel_info.exec.types import ResponseValidator, RetryPolicy, SleepFunc
from travel_info.metrics.core import record_source_call

logger = logging.getLogger(__name__)


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    policy: RetryPolicy,
    timeout_s: float,
    source_name: str,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
    validate: ResponseValidator | None = None,
    sleep: SleepFunc = asyncio.sleep,
    method: str = "GET",
) -> httpx.Response | None:
    """Fetch a URL, retrying transient failures.

    Network errors, timeouts, non-404 HTTP errors and payloads rejected by
    ``validate`` are retried up to ``policy.max_retries`` times with a delay
    of ``policy.base_delay_s * attempt`` between attempts. A 404 is "no data"
    and is returned as None without retrying.

    Args:
        client: Shared async HTTP client.
        url: URL to fetch.
        policy: Retry policy.
        timeout_s: Timeout for each attempt in seconds.
        source_name: Source name for logs, metrics and errors.
        headers: Optional request headers.
        params: Optional query parameters.
        validate: Optional payload shape check, raises InvalidResponseError.
        sleep: Sleep callable used for backoff.
        method: HTTP method.

    Returns:
        The successful response, or None on 404.

    Raises:
        NetworkError: When every attempt failed. Carries the attempt count
            and the last cause.
    """
    start_time = time.monotonic()
    last_error: Exception | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            response = await asyncio.wait_for(
                client.request(
                    method, url, headers=headers, params=params, timeout=timeout_s
                ),
                timeout=timeout_s,
            )
            if response.status_code == 404:
                logger.warning("Upstream returned 404: %s", url)
                _record(source_name, start_time, False, attempt - 1, ErrorKind.NOT_FOUND)
                return None
            response.raise_for_status()
            if validate is not None:
                validate(response)
            _record(source_name, start_time, True, attempt - 1, None)
            return response
        except (httpx.HTTPError, TimeoutError, InvalidResponseError) as e:
            last_error = e
            logger.warning(
                "Attempt %d/%d failed for %s: %s",
                attempt,
                policy.max_attempts,
                url,
                str(e) or type(e).__name__,
            )
            if attempt < policy.max_attempts:
                await sleep(policy.delay_for(attempt))

    _record(
        source_name, start_time, False, policy.max_attempts - 1, ErrorKind.NETWORK_ERROR
    )
    raise NetworkError(
        f"Failed to fetch {url} after {policy.max_attempts} attempts",
        source_name,
        attempts=policy.max_attempts,
        cause=last_error,
    ) from last_error


def _record(
    source_name: str,
    start_time: float,
    ok: bool,
    retries: int,
    error_kind: ErrorKind | None,
) -> None:
    latency_ms = int((time.monotonic() - start_time) * 1000)
    record_source_call(
        source=source_name,
        latency_ms=latency_ms,
        ok=ok,
        from_cache=False,
        retries=retries,
        error_kind=error_kind,
    )
