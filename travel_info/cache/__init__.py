"""Category cache: key scheme, TTL policy and the two cache tiers."""

from travel_info.cache.config import (
    CACHE_KEY_PREFIX,
    CACHE_KEY_SEPARATOR,
    CACHE_TTL_CONFIG,
    EXCHANGE_RATE_TTL,
    FILE_CACHE_DEFAULTS,
    MEMORY_CACHE_DEFAULTS,
    calculate_hit_rate,
    create_empty_cache_stats,
    generate_cache_key,
    generate_cache_key_pattern,
    generate_composite_cache_key,
    get_category_ttl,
    get_category_ttl_seconds,
    normalize_destination,
    pattern_to_regex,
)
from travel_info.cache.file import FileCache
from travel_info.cache.manager import CacheManager
from travel_info.cache.memory import MemoryCache
from travel_info.cache.types import CacheEntry, CacheStats

__all__ = [
    "CACHE_KEY_PREFIX",
    "CACHE_KEY_SEPARATOR",
    "CACHE_TTL_CONFIG",
    "EXCHANGE_RATE_TTL",
    "FILE_CACHE_DEFAULTS",
    "MEMORY_CACHE_DEFAULTS",
    "CacheEntry",
    "CacheManager",
    "CacheStats",
    "FileCache",
    "MemoryCache",
    "calculate_hit_rate",
    "create_empty_cache_stats",
    "generate_cache_key",
    "generate_cache_key_pattern",
    "generate_composite_cache_key",
    "get_category_ttl",
    "get_category_ttl_seconds",
    "normalize_destination",
    "pattern_to_regex",
]
