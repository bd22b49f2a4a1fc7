"""Destination to country-code resolution."""

from .destination import (
    RESOLUTION_STAGES,
    get_country_name_by_code,
    get_default_emergency_contacts,
    get_embassy_by_code,
    get_emergency_contacts_by_code,
    get_english_name_by_code,
    get_supported_destinations,
    match_english_alias,
    match_exact,
    match_hint,
    match_partial,
    normalize_for_match,
    resolve,
)

__all__ = [
    "RESOLUTION_STAGES",
    "get_country_name_by_code",
    "get_default_emergency_contacts",
    "get_embassy_by_code",
    "get_emergency_contacts_by_code",
    "get_english_name_by_code",
    "get_supported_destinations",
    "match_english_alias",
    "match_exact",
    "match_hint",
    "match_partial",
    "normalize_for_match",
    "resolve",
]
