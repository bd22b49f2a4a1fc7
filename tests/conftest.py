"""Pytest configuration and fixtures for testing."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from travel_info.config import Settings


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        cache_dir=str(tmp_path / "cache"),
        file_cache_enabled=True,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Backoff sleep that records delays instead of waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
