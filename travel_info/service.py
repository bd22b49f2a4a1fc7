"""Aggregation orchestrator: cache-first, per-category fan-out to sources."""

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import httpx
from pydantic import BaseModel

from travel_info.cache.config import (
    CACHE_KEY_SEPARATOR,
    WILDCARD,
    create_empty_cache_stats,
    generate_cache_key,
    generate_cache_key_pattern,
    get_category_ttl_seconds,
)
from travel_info.cache.manager import CacheManager
from travel_info.cache.types import CacheEntry, CacheStats
from travel_info.config import Settings, get_settings
from travel_info.errors import ErrorKind
from travel_info.metrics.core import record_source_call
from travel_info.models.common import (
    SourceFailure,
    SourceMetadata,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    parse_categories,
)
from travel_info.models.response import (
    CategoryResult,
    CategoryStatus,
    ResolveOptions,
    TravelInfoResponse,
)
from travel_info.resolver.destination import resolve
from travel_info.sources.base import TravelInfoSource
from travel_info.sources.climate import create_climate_source
from travel_info.sources.country_api import create_country_source
from travel_info.sources.mofa import create_mofa_source

logger = logging.getLogger(__name__)

CategoriesArg = str | Iterable[str | TravelInfoCategory] | None
OptionsArg = ResolveOptions | Mapping[str, Any] | None


class TravelInfoService:
    """Resolves travel information for a destination, one task per category.

    A failing category never fails the request; it is reported with an
    error status next to the categories that succeeded.
    """

    def __init__(
        self,
        sources: Sequence[TravelInfoSource],
        cache: CacheManager | None = None,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            sources: Adapters in priority order; for each category the first
                success wins.
            cache: Category cache; None disables caching.
            settings: Service settings.
            client: HTTP client shared by the sources, closed by ``aclose``.
        """
        self.settings = settings or get_settings()
        self.sources = list(sources)
        self.cache = cache
        self._client = client
        self._sources_by_category: dict[TravelInfoCategory, list[TravelInfoSource]] = {}
        for source in self.sources:
            for category in source.supported_categories:
                self._sources_by_category.setdefault(category, []).append(source)
        self._inflight: dict[str, asyncio.Task[CategoryResult]] = {}

    def sources_for(self, category: TravelInfoCategory) -> list[TravelInfoSource]:
        return list(self._sources_by_category.get(category, []))

    async def resolve_travel_info(
        self,
        destination: str,
        categories: CategoriesArg = None,
        options: OptionsArg = None,
    ) -> TravelInfoResponse:
        """Resolve the requested categories concurrently.

        Args:
            destination: Free-text destination.
            categories: Category names, comma separated or as a list;
                defaults to basic and safety.
            options: ``ResolveOptions`` or a mapping with ``country``,
                ``dates`` and ``timeout_s``.

        Returns:
            Per-category status map.
        """
        requested = parse_categories(categories)
        if not isinstance(options, ResolveOptions):
            options = ResolveOptions.model_validate(options or {})

        response = TravelInfoResponse.pending(
            destination, requested, country_code=resolve(destination, options.country)
        )
        results = await asyncio.gather(
            *(self._resolve_category(destination, c, options) for c in requested)
        )
        for result in results:
            response.results[result.category] = result

        logger.info(
            "Resolved travel info",
            extra={
                "destination": destination,
                "succeeded": [c.value for c in response.succeeded],
                "failed": [c.value for c in response.failed],
            },
        )
        return response

    async def _resolve_category(
        self,
        destination: str,
        category: TravelInfoCategory,
        options: ResolveOptions,
    ) -> CategoryResult:
        """Join an identical in-flight load or start a new one."""
        key = generate_cache_key(destination, category, options.cache_options(category))
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(
                self._load_category(key, destination, category, options)
            )
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))

        try:
            result = await asyncio.shield(task)
        except Exception as e:
            logger.exception("Unexpected error resolving %s for %s", category.value, destination)
            return CategoryResult(
                category=category,
                status=CategoryStatus.error,
                error=str(e) or type(e).__name__,
                error_kind=ErrorKind.UNKNOWN,
            )
        return result.model_copy(deep=True)

    def _forget(self, key: str, task: asyncio.Task[CategoryResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _load_category(
        self,
        key: str,
        destination: str,
        category: TravelInfoCategory,
        options: ResolveOptions,
    ) -> CategoryResult:
        start_time = time.monotonic()
        if self.cache is not None:
            entry = await self.cache.get(key)
            if entry is not None:
                record_source_call(
                    source=f"cache:{category.value}",
                    latency_ms=int((time.monotonic() - start_time) * 1000),
                    ok=True,
                    from_cache=True,
                    retries=0,
                    error_kind=None,
                )
                return _result_from_cache(category, entry)

        sources = self.sources_for(category)
        if not sources:
            return CategoryResult(
                category=category,
                status=CategoryStatus.error,
                error=f"No source available for category {category.value}",
                error_kind=ErrorKind.NO_SOURCE,
            )

        failure: SourceFailure | None = None
        for source in sources:
            try:
                result = await source.fetch(destination, options)
            except Exception as e:
                logger.exception("Source %s raised for %s", source.source_name, destination)
                failure = SourceFailure(
                    error_kind=ErrorKind.UNKNOWN, message=str(e) or type(e).__name__
                )
                continue

            if isinstance(result, SourceSuccess):
                data = _to_json_data(result.data)
                await self._store(key, category, source, data, result.source)
                return CategoryResult(
                    category=category,
                    status=CategoryStatus.success,
                    data=data,
                    source=result.source,
                )
            failure = result
            logger.warning(
                "Source %s failed for %s/%s: %s",
                source.source_name,
                destination,
                category.value,
                result.message,
            )

        return CategoryResult(
            category=category,
            status=CategoryStatus.error,
            error=failure.message if failure else "All sources failed",
            error_kind=failure.error_kind if failure else ErrorKind.UNKNOWN,
        )

    async def _store(
        self,
        key: str,
        category: TravelInfoCategory,
        source: TravelInfoSource,
        data: dict[str, Any],
        metadata: SourceMetadata,
    ) -> None:
        """Cache a successful result under the shorter of the two TTLs."""
        if self.cache is None or metadata.source_type == SourceType.default:
            return
        ttl_seconds = get_category_ttl_seconds(category)
        source_ttl = getattr(source, "cache_ttl_seconds", None)
        if source_ttl:
            ttl_seconds = min(ttl_seconds, source_ttl)
        await self.cache.set(
            key,
            {"data": data, "source": metadata.model_dump(mode="json")},
            ttl_seconds=ttl_seconds,
        )

    async def invalidate(
        self,
        destination: str | None = None,
        category: TravelInfoCategory | str | None = None,
    ) -> int:
        """Drop cached results for a destination, a category, or everything."""
        if self.cache is None:
            return 0
        pattern = generate_cache_key_pattern(destination, category)
        removed = await self.cache.invalidate(pattern)
        if category:
            # Keys carrying options have extra segments
            removed += await self.cache.invalidate(f"{pattern}{CACHE_KEY_SEPARATOR}{WILDCARD}")
        return removed

    def cache_stats(self) -> CacheStats:
        if self.cache is None:
            return create_empty_cache_stats()
        return self.cache.stats()

    def start(self) -> None:
        """Start background cache maintenance; needs a running event loop."""
        if self.cache is not None:
            self.cache.start()

    async def aclose(self) -> None:
        if self.cache is not None:
            await self.cache.close()
        for source in self.sources:
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _to_json_data(data: Any) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    return dict(data)


def _result_from_cache(category: TravelInfoCategory, entry: CacheEntry) -> CategoryResult:
    """Rebuild a result from a cache entry, tagging its source as the cache."""
    cached = entry.data
    source = SourceMetadata.model_validate(cached["source"])
    return CategoryResult(
        category=category,
        status=CategoryStatus.success,
        data=cached["data"],
        source=source.model_copy(update={"source_type": SourceType.cache}),
        from_cache=True,
    )


def create_default_service(
    settings: Settings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> TravelInfoService:
    """Wire the MOFA, REST Countries and Open-Meteo sources with a two-tier cache."""
    settings = settings or get_settings()
    owned_client = None
    if client is None:
        client = owned_client = httpx.AsyncClient()

    sources: list[TravelInfoSource] = [
        create_mofa_source(settings, client=client),
        create_country_source(settings, client=client),
        create_climate_source(settings, client=client),
    ]
    return TravelInfoService(
        sources,
        cache=CacheManager.from_settings(settings),
        settings=settings,
        client=owned_client,
    )


_default_service: TravelInfoService | None = None


def get_default_service() -> TravelInfoService:
    """Get the process-wide service singleton."""
    global _default_service
    if _default_service is None:
        _default_service = create_default_service()
    return _default_service


async def resolve_travel_info(
    destination: str,
    categories: CategoriesArg = None,
    options: OptionsArg = None,
) -> TravelInfoResponse:
    """Resolve travel information with the default service."""
    return await get_default_service().resolve_travel_info(destination, categories, options)
