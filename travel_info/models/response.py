"""Request options and per-category response models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from travel_info.errors import ErrorKind

from .common import SourceMetadata, TravelInfoCategory


class DateRange(BaseModel):
    """Travel dates."""

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> DateRange:
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class ResolveOptions(BaseModel):
    """Options accepted by sources and the orchestrator."""

    country: str | None = Field(
        default=None, description="Explicit country name, disambiguates city names"
    )
    dates: DateRange | None = Field(default=None, description="Travel dates")
    timeout_s: float | None = Field(
        default=None, gt=0, description="Per-call timeout override in seconds"
    )

    def cache_options(self, category: TravelInfoCategory) -> dict[str, str]:
        """Options that change the payload and therefore the cache key."""
        options: dict[str, str] = {}
        if self.country:
            options["country"] = self.country
        if self.dates and category == TravelInfoCategory.climate:
            options["start"] = self.dates.start.isoformat()
            options["end"] = self.dates.end.isoformat()
        return options


class CategoryStatus(str, Enum):
    """Status of one category in a response."""

    success = "success"
    error = "error"
    pending = "pending"


class CategoryResult(BaseModel):
    """Outcome for one requested category."""

    category: TravelInfoCategory
    status: CategoryStatus = CategoryStatus.pending
    data: dict[str, Any] | None = None
    source: SourceMetadata | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    from_cache: bool = False


class TravelInfoResponse(BaseModel):
    """Per-category status map for one destination."""

    destination: str
    country_code: str | None = None
    results: dict[TravelInfoCategory, CategoryResult] = Field(default_factory=dict)

    @classmethod
    def pending(
        cls,
        destination: str,
        categories: list[TravelInfoCategory],
        country_code: str | None = None,
    ) -> TravelInfoResponse:
        """Create a response with every category pending."""
        return cls(
            destination=destination,
            country_code=country_code,
            results={c: CategoryResult(category=c) for c in categories},
        )

    @property
    def succeeded(self) -> list[TravelInfoCategory]:
        return [
            c for c, r in self.results.items() if r.status == CategoryStatus.success
        ]

    @property
    def failed(self) -> list[TravelInfoCategory]:
        return [c for c, r in self.results.items() if r.status == CategoryStatus.error]
