"""Common data types and enums used across the service."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from travel_info.errors import ErrorKind

T = TypeVar("T")


class TravelInfoCategory(str, Enum):
    """Named slice of travel information."""

    basic = "basic"
    safety = "safety"
    climate = "climate"
    visa = "visa"
    manner = "manner"
    transport = "transport"
    local_food = "local_food"
    souvenir = "souvenir"
    events = "events"
    technology = "technology"
    healthcare = "healthcare"
    restrooms = "restrooms"
    smoking = "smoking"
    alcohol = "alcohol"


DEFAULT_CATEGORIES: tuple[TravelInfoCategory, ...] = (
    TravelInfoCategory.basic,
    TravelInfoCategory.safety,
)


def parse_categories(
    raw: str | Iterable[str | TravelInfoCategory] | None,
) -> list[TravelInfoCategory]:
    """Parse categories from a comma separated string or an iterable.

    Unknown names are dropped, duplicates collapse to their first position,
    and an empty result falls back to the default categories.
    """
    if raw is None:
        return list(DEFAULT_CATEGORIES)
    if isinstance(raw, str):
        raw = raw.split(",")

    parsed: list[TravelInfoCategory] = []
    for item in raw:
        value = item.value if isinstance(item, TravelInfoCategory) else str(item).strip()
        try:
            category = TravelInfoCategory(value)
        except ValueError:
            continue
        if category not in parsed:
            parsed.append(category)

    return parsed or list(DEFAULT_CATEGORIES)


class SourceType(str, Enum):
    """Kind of data source."""

    official_api = "official_api"
    web_search = "web_search"
    ai_generated = "ai_generated"
    cache = "cache"
    default = "default"


class SourceMetadata(BaseModel):
    """Tracks the origin and freshness of a category payload."""

    source_type: SourceType = Field(description="Kind of data source")
    source_name: str = Field(description="Human readable source name")
    source_url: str | None = Field(default=None, description="URL of the data source")
    retrieved_at: datetime = Field(description="When the data was retrieved")
    reliability_score: int = Field(
        ge=0, le=100, description="Confidence weight of the source (0-100)"
    )
    response_digest: str | None = Field(
        default=None, description="Hash of the payload for deduplication"
    )


def compute_response_digest(data: Any) -> str:
    """
    Compute SHA256 digest of response data for deduplication.

    Args:
        data: Any JSON-serializable data

    Returns:
        Hex string digest of the data
    """
    json_str = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(json_str.encode()).hexdigest()


def create_source_metadata(
    source_type: SourceType,
    source_name: str,
    reliability_score: int,
    source_url: str | None = None,
    retrieved_at: datetime | None = None,
    response_data: Any = None,
) -> SourceMetadata:
    """Create SourceMetadata with automatic timestamp and digest."""
    if retrieved_at is None:
        retrieved_at = datetime.now(UTC)

    response_digest = None
    if response_data is not None:
        response_digest = compute_response_digest(response_data)

    return SourceMetadata(
        source_type=source_type,
        source_name=source_name,
        source_url=source_url,
        retrieved_at=retrieved_at,
        reliability_score=reliability_score,
        response_digest=response_digest,
    )


class SourceSuccess(BaseModel, Generic[T]):
    """Successful source fetch."""

    ok: Literal[True] = True
    data: T
    source: SourceMetadata


class SourceFailure(BaseModel):
    """Failed source fetch; never raised, always returned."""

    ok: Literal[False] = False
    error_kind: ErrorKind
    message: str


SourceResult = SourceSuccess | SourceFailure
