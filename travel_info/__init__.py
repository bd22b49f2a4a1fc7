"""Travel information aggregation service.

Resolves a free-text destination into safety, country and climate data from
several upstream sources, with a two-tier category cache in front.
"""

from travel_info.models import (
    CategoryResult,
    CategoryStatus,
    ResolveOptions,
    TravelInfoCategory,
    TravelInfoResponse,
)
from travel_info.service import (
    TravelInfoService,
    create_default_service,
    resolve_travel_info,
)

__all__ = [
    "CategoryResult",
    "CategoryStatus",
    "ResolveOptions",
    "TravelInfoCategory",
    "TravelInfoResponse",
    "TravelInfoService",
    "create_default_service",
    "resolve_travel_info",
]
