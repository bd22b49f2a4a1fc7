"""Source adapters for travel information."""

from travel_info.sources.base import TravelInfoSource, failure_from_error
from travel_info.sources.climate import (
    OpenMeteoClimateSource,
    create_climate_source,
    recommend_clothing,
)
from travel_info.sources.country_api import (
    CountryApiSource,
    calculate_time_difference,
    create_country_source,
)
from travel_info.sources.mofa import MofaSafetySource, create_mofa_source, parse_opendata

__all__ = [
    "CountryApiSource",
    "MofaSafetySource",
    "OpenMeteoClimateSource",
    "TravelInfoSource",
    "calculate_time_difference",
    "create_climate_source",
    "create_country_source",
    "create_mofa_source",
    "failure_from_error",
    "parse_opendata",
    "recommend_clothing",
]
