"""Map free-text destinations to MOFA country codes.

Resolution is an ordered chain of pure stage functions; the first stage that
returns a code wins. ``None`` means the destination is unknown and callers
should fall back to default data.
"""

import logging
import re
from collections.abc import Callable, Iterable

from travel_info.models.travel_info import Embassy, EmergencyContact
from travel_info.resolver.tables import (
    COUNTRY_CODE_TO_ENGLISH_NAME,
    COUNTRY_CODE_TO_NAME,
    DEFAULT_EMERGENCY_CONTACTS,
    DESTINATION_TO_COUNTRY_CODE,
    EMBASSIES_BY_COUNTRY,
    EMERGENCY_CONTACTS_BY_COUNTRY,
    ENGLISH_NAME_TO_CODE,
)

logger = logging.getLogger(__name__)

# ASCII and full-width parentheses plus any whitespace
_STRIP_PATTERN = re.compile(r"[()（）]|\s+")

Stage = Callable[[str, str | None], str | None]


def normalize_for_match(text: str) -> str:
    """Remove parentheses and whitespace for substring matching."""
    return _STRIP_PATTERN.sub("", text)


def match_exact(destination: str, hint: str | None = None) -> str | None:
    """Stage 1: exact match of the destination."""
    return DESTINATION_TO_COUNTRY_CODE.get(destination)


def match_hint(destination: str, hint: str | None = None) -> str | None:
    """Stage 2: exact match of the explicit country hint."""
    if not hint:
        return None
    return DESTINATION_TO_COUNTRY_CODE.get(hint)


def match_english_alias(destination: str, hint: str | None = None) -> str | None:
    """Stage 3: English alias table, destination first, then hint."""
    code = ENGLISH_NAME_TO_CODE.get(destination)
    if code is None and hint:
        code = ENGLISH_NAME_TO_CODE.get(hint)
    return code


_NORMALIZED_DESTINATIONS: tuple[tuple[str, str], ...] = tuple(
    (normalize_for_match(key), code) for key, code in DESTINATION_TO_COUNTRY_CODE.items()
)


def _match_substring(text: str) -> str | None:
    normalized = normalize_for_match(text)
    if not normalized:
        return None
    for key, code in _NORMALIZED_DESTINATIONS:
        if normalized in key or key in normalized:
            return code
    return None


def match_partial(destination: str, hint: str | None = None) -> str | None:
    """Stage 4: bidirectional substring match in table order."""
    code = _match_substring(destination)
    if code is None and hint:
        code = _match_substring(hint)
    return code


RESOLUTION_STAGES: tuple[Stage, ...] = (
    match_exact,
    match_hint,
    match_english_alias,
    match_partial,
)


def resolve(
    destination: str,
    hint: str | None = None,
    stages: Iterable[Stage] = RESOLUTION_STAGES,
) -> str | None:
    """Resolve a destination (and optional country hint) to a country code.

    Args:
        destination: Free-text country, city or region name.
        hint: Explicit country name, used to disambiguate city names.
        stages: Stage functions tried in order.

    Returns:
        The MOFA country code, or None when every stage fails.
    """
    destination = (destination or "").strip()
    hint = hint.strip() if hint else None

    for stage in stages:
        code = stage(destination, hint)
        if code is not None:
            logger.debug(
                "Resolved destination",
                extra={"destination": destination, "stage": stage.__name__, "code": code},
            )
            return code

    logger.info("Unresolved destination", extra={"destination": destination, "hint": hint})
    return None


def get_country_name_by_code(country_code: str) -> str | None:
    """Canonical Japanese country name for a code."""
    return COUNTRY_CODE_TO_NAME.get(country_code)


def get_english_name_by_code(country_code: str) -> str | None:
    """First English alias listed for a code."""
    return COUNTRY_CODE_TO_ENGLISH_NAME.get(country_code)


def get_supported_destinations() -> list[str]:
    """All destination names with an exact table entry."""
    return list(DESTINATION_TO_COUNTRY_CODE)


def get_default_emergency_contacts() -> list[EmergencyContact]:
    return list(DEFAULT_EMERGENCY_CONTACTS)


def get_emergency_contacts_by_code(country_code: str) -> list[EmergencyContact]:
    """Local emergency numbers, or the Japanese consular defaults."""
    contacts = EMERGENCY_CONTACTS_BY_COUNTRY.get(country_code)
    if not contacts:
        return get_default_emergency_contacts()
    return list(contacts)


def get_embassy_by_code(country_code: str) -> Embassy | None:
    return EMBASSIES_BY_COUNTRY.get(country_code)
