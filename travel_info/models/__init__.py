"""Convenient imports for all model types."""

# Common types and enums
from .common import (
    DEFAULT_CATEGORIES,
    SourceFailure,
    SourceMetadata,
    SourceResult,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    compute_response_digest,
    create_source_metadata,
    parse_categories,
)

# Orchestrator request/response models
from .response import (
    CategoryResult,
    CategoryStatus,
    DateRange,
    ResolveOptions,
    TravelInfoResponse,
)

# Category payloads
from .travel_info import (
    DANGER_LEVEL_DESCRIPTIONS,
    BasicCountryInfo,
    ClimateInfo,
    CurrencyInfo,
    DailyForecast,
    Embassy,
    EmergencyContact,
    HighRiskRegion,
    SafetyInfo,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "DANGER_LEVEL_DESCRIPTIONS",
    "BasicCountryInfo",
    "CategoryResult",
    "CategoryStatus",
    "ClimateInfo",
    "CurrencyInfo",
    "DailyForecast",
    "DateRange",
    "Embassy",
    "EmergencyContact",
    "HighRiskRegion",
    "ResolveOptions",
    "SafetyInfo",
    "SourceFailure",
    "SourceMetadata",
    "SourceResult",
    "SourceSuccess",
    "SourceType",
    "TravelInfoCategory",
    "TravelInfoResponse",
    "compute_response_digest",
    "create_source_metadata",
    "parse_categories",
]
