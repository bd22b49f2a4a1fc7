"""Cache key scheme and TTL policy.

Keys look like ``travel-info:{destination}:{category}[:{k=v}...]`` where the
destination is normalized and options are sorted by name. TTLs are kept in
milliseconds; the seconds accessor floors.
"""

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from travel_info.cache.types import CacheStats
from travel_info.models.common import TravelInfoCategory

CACHE_KEY_PREFIX = "travel-info"
CACHE_KEY_SEPARATOR = ":"
WILDCARD = "*"

_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS

EXCHANGE_RATE_TTL = _HOUR_MS

CACHE_TTL_CONFIG: Mapping[TravelInfoCategory, int] = MappingProxyType({
    TravelInfoCategory.basic: 24 * _HOUR_MS,
    TravelInfoCategory.safety: 6 * _HOUR_MS,
    TravelInfoCategory.climate: 30 * _MINUTE_MS,
    TravelInfoCategory.visa: 24 * _HOUR_MS,
    TravelInfoCategory.manner: 7 * _DAY_MS,
    TravelInfoCategory.transport: 24 * _HOUR_MS,
    TravelInfoCategory.local_food: 7 * _DAY_MS,
    TravelInfoCategory.souvenir: 7 * _DAY_MS,
    TravelInfoCategory.events: 6 * _HOUR_MS,
    TravelInfoCategory.technology: 7 * _DAY_MS,
    TravelInfoCategory.healthcare: 24 * _HOUR_MS,
    TravelInfoCategory.restrooms: 7 * _DAY_MS,
    TravelInfoCategory.smoking: 7 * _DAY_MS,
    TravelInfoCategory.alcohol: 7 * _DAY_MS,
})

MEMORY_CACHE_DEFAULTS: Mapping[str, int] = MappingProxyType({
    "max_entries": 1000,
    "cleanup_interval_ms": _MINUTE_MS,
    "default_ttl_ms": _HOUR_MS,
})

FILE_CACHE_DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "cache_dir": ".cache/travel-info",
    "max_entries": 5000,
    "default_ttl_ms": _HOUR_MS,
})

_WHITESPACE = re.compile(r"\s+")
# Keep ASCII letters and digits, hyphens, and anything non-ASCII (CJK etc.)
_DISALLOWED = re.compile(r"[^a-z0-9\-\u0080-\U0010ffff]")


def normalize_destination(destination: str) -> str:
    """Normalize a destination for use inside a cache key."""
    normalized = _WHITESPACE.sub("-", destination.strip().lower())
    return _DISALLOWED.sub("", normalized)


def _category_value(category: TravelInfoCategory | str) -> str:
    return category.value if isinstance(category, TravelInfoCategory) else str(category)


def _options_suffix(options: Mapping[str, Any] | None) -> list[str]:
    if not options:
        return []
    return [f"{k}={options[k]}" for k in sorted(options) if options[k] is not None]


def generate_cache_key(
    destination: str,
    category: TravelInfoCategory | str,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Build the key for one destination and category."""
    parts = [
        CACHE_KEY_PREFIX,
        normalize_destination(destination),
        _category_value(category),
        *_options_suffix(options),
    ]
    return CACHE_KEY_SEPARATOR.join(parts)


def generate_composite_cache_key(
    destination: str,
    categories: Iterable[TravelInfoCategory | str],
    options: Mapping[str, Any] | None = None,
) -> str:
    """Build a key covering several categories, sorted by name."""
    names = sorted({_category_value(c) for c in categories})
    parts = [
        CACHE_KEY_PREFIX,
        normalize_destination(destination),
        ",".join(names),
        *_options_suffix(options),
    ]
    return CACHE_KEY_SEPARATOR.join(parts)


def generate_cache_key_pattern(
    destination: str | None = None,
    category: TravelInfoCategory | str | None = None,
) -> str:
    """Build a ``*`` wildcard pattern for key enumeration and invalidation."""
    return CACHE_KEY_SEPARATOR.join(
        [
            CACHE_KEY_PREFIX,
            normalize_destination(destination) if destination else WILDCARD,
            _category_value(category) if category else WILDCARD,
        ]
    )


def pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a wildcard pattern into an anchored regex."""
    escaped = re.escape(pattern).replace(re.escape(WILDCARD), ".*")
    return re.compile(f"^{escaped}$")


def get_category_ttl(category: TravelInfoCategory | str) -> int:
    """TTL in milliseconds, the memory default for unknown categories."""
    try:
        return CACHE_TTL_CONFIG[TravelInfoCategory(_category_value(category))]
    except (KeyError, ValueError):
        return MEMORY_CACHE_DEFAULTS["default_ttl_ms"]


def get_category_ttl_seconds(category: TravelInfoCategory | str) -> int:
    return get_category_ttl(category) // _SECOND_MS


def create_empty_cache_stats() -> CacheStats:
    return CacheStats()


def calculate_hit_rate(hits: int, misses: int) -> float:
    """hits / (hits + misses), 0 when there were no lookups."""
    total = hits + misses
    if total == 0:
        return 0.0
    return hits / total
