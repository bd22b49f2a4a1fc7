"""Common capability of travel info sources."""

from typing import Protocol, runtime_checkable

from travel_info.errors import TravelInfoServiceError
from travel_info.models.common import (
    SourceFailure,
    SourceResult,
    SourceType,
    TravelInfoCategory,
)
from travel_info.models.response import ResolveOptions


@runtime_checkable
class TravelInfoSource(Protocol):
    """A connector to one upstream data source.

    ``fetch`` never raises for expected failures; it returns a
    ``SourceFailure`` or a low-reliability default payload instead.
    """

    source_name: str
    source_type: SourceType
    reliability_score: int
    supported_categories: tuple[TravelInfoCategory, ...]
    # Freshness bound of the upstream data, None when unbounded
    cache_ttl_seconds: int | None

    async def fetch(
        self, destination: str, options: ResolveOptions | None = None
    ) -> SourceResult:
        ...

    async def is_available(self) -> bool:
        ...


def failure_from_error(error: TravelInfoServiceError) -> SourceFailure:
    """Convert an adapter-internal exception into a result value."""
    return SourceFailure(error_kind=error.kind, message=str(error))
