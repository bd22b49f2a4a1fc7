"""Tests for the aggregation orchestrator."""

import asyncio
from unittest.mock import patch

import pytest

from travel_info.cache.config import generate_cache_key
from travel_info.cache.manager import CacheManager
from travel_info.cache.memory import MemoryCache
from travel_info.errors import ErrorKind
from travel_info.models.common import (
    SourceFailure,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    create_source_metadata,
)
from travel_info.models.response import CategoryStatus
from travel_info.models.travel_info import BasicCountryInfo, SafetyInfo
from travel_info.service import TravelInfoService, create_default_service
from travel_info.sources.base import TravelInfoSource


class FakeSource:
    """Source returning a fixed result and counting fetches."""

    reliability_score = 80

    def __init__(
        self,
        name,
        categories,
        result=None,
        *,
        source_type=SourceType.official_api,
        cache_ttl_seconds=None,
        delay=0.0,
        error=None,
    ):
        self.source_name = name
        self.source_type = source_type
        self.supported_categories = tuple(categories)
        self.cache_ttl_seconds = cache_ttl_seconds
        self.result = result
        self.delay = delay
        self.error = error
        self.calls = []

    async def fetch(self, destination, options=None):
        self.calls.append((destination, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return SourceSuccess(
            data=BasicCountryInfo(country_name=destination),
            source=create_source_metadata(
                source_type=self.source_type,
                source_name=self.source_name,
                reliability_score=self.reliability_score,
                source_url=f"https://{self.source_name}.test",
            ),
        )

    async def is_available(self):
        return True


def _safety_success():
    return SourceSuccess(
        data=SafetyInfo(danger_level=1),
        source=create_source_metadata(
            source_type=SourceType.official_api,
            source_name="safety-feed",
            reliability_score=95,
        ),
    )


@pytest.fixture
def cache(clock):
    return CacheManager(MemoryCache(clock=clock))


def test_fake_source_satisfies_protocol():
    assert isinstance(FakeSource("a", [TravelInfoCategory.basic]), TravelInfoSource)


@pytest.mark.asyncio
async def test_partial_failure_keeps_successful_categories(settings, cache):
    basic = FakeSource(
        "countries",
        [TravelInfoCategory.basic],
        SourceFailure(error_kind=ErrorKind.NETWORK_ERROR, message="upstream down"),
    )
    safety = FakeSource("safety", [TravelInfoCategory.safety], _safety_success())
    service = TravelInfoService([basic, safety], cache, settings)

    response = await service.resolve_travel_info("バンコク")

    assert response.destination == "バンコク"
    assert response.country_code == "0066"
    assert response.succeeded == [TravelInfoCategory.safety]
    assert response.failed == [TravelInfoCategory.basic]
    failed = response.results[TravelInfoCategory.basic]
    assert failed.status == CategoryStatus.error
    assert failed.error == "upstream down"
    assert failed.error_kind == ErrorKind.NETWORK_ERROR
    safety_result = response.results[TravelInfoCategory.safety]
    assert safety_result.data["danger_level"] == 1
    assert safety_result.source.source_name == "safety-feed"


@pytest.mark.asyncio
async def test_categories_parsed_from_string(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], cache, settings)

    response = await service.resolve_travel_info("パリ", "basic, nope, basic")

    assert list(response.results) == [TravelInfoCategory.basic]


@pytest.mark.asyncio
async def test_cache_hit_skips_upstream(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], cache, settings)

    first = await service.resolve_travel_info("パリ", ["basic"])
    with patch("travel_info.service.record_source_call") as mock_metrics:
        second = await service.resolve_travel_info("パリ", ["basic"])

    assert len(source.calls) == 1
    cached = second.results[TravelInfoCategory.basic]
    assert cached.from_cache is True
    assert cached.data == first.results[TravelInfoCategory.basic].data
    assert cached.source.source_type == SourceType.cache
    assert cached.source.source_name == "countries"
    assert cached.source.retrieved_at == first.results[TravelInfoCategory.basic].source.retrieved_at
    assert mock_metrics.call_args.kwargs["source"] == "cache:basic"
    assert mock_metrics.call_args.kwargs["from_cache"] is True


@pytest.mark.asyncio
async def test_country_option_is_part_of_cache_key(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], cache, settings)

    await service.resolve_travel_info("Springfield", ["basic"])
    await service.resolve_travel_info("Springfield", ["basic"], {"country": "アメリカ"})

    assert len(source.calls) == 2
    assert source.calls[1][1].country == "アメリカ"


@pytest.mark.asyncio
async def test_category_without_source(settings, cache):
    service = TravelInfoService([], cache, settings)

    response = await service.resolve_travel_info("パリ", ["visa"])

    result = response.results[TravelInfoCategory.visa]
    assert result.status == CategoryStatus.error
    assert result.error_kind == ErrorKind.NO_SOURCE


@pytest.mark.asyncio
async def test_default_results_are_not_cached(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic], source_type=SourceType.default)
    service = TravelInfoService([source], cache, settings)

    await service.resolve_travel_info("Atlantis", ["basic"])
    response = await service.resolve_travel_info("Atlantis", ["basic"])

    assert len(source.calls) == 2
    assert response.results[TravelInfoCategory.basic].status == CategoryStatus.success
    assert response.results[TravelInfoCategory.basic].from_cache is False


@pytest.mark.asyncio
async def test_ttl_is_shorter_of_category_and_source(settings, cache):
    safety = FakeSource(
        "safety", [TravelInfoCategory.safety], _safety_success(), cache_ttl_seconds=300
    )
    basic = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([safety, basic], cache, settings)

    await service.resolve_travel_info("タイ", ["safety", "basic"])

    safety_entry = cache.memory.get(generate_cache_key("タイ", TravelInfoCategory.safety))
    basic_entry = cache.memory.get(generate_cache_key("タイ", TravelInfoCategory.basic))
    assert safety_entry.ttl_ms == 300_000
    assert basic_entry.ttl_ms == 24 * 60 * 60 * 1000


@pytest.mark.asyncio
async def test_falls_through_to_next_source(settings, cache):
    failing = FakeSource(
        "primary",
        [TravelInfoCategory.basic],
        SourceFailure(error_kind=ErrorKind.NOT_FOUND, message="missing"),
    )
    backup = FakeSource("backup", [TravelInfoCategory.basic])
    service = TravelInfoService([failing, backup], cache, settings)

    response = await service.resolve_travel_info("パリ", ["basic"])

    result = response.results[TravelInfoCategory.basic]
    assert result.status == CategoryStatus.success
    assert result.source.source_name == "backup"
    assert len(failing.calls) == 1


@pytest.mark.asyncio
async def test_unexpected_source_exception_is_contained(settings, cache):
    broken = FakeSource("broken", [TravelInfoCategory.basic], error=RuntimeError("bug"))
    safety = FakeSource("safety", [TravelInfoCategory.safety], _safety_success())
    service = TravelInfoService([broken, safety], cache, settings)

    response = await service.resolve_travel_info("パリ")

    result = response.results[TravelInfoCategory.basic]
    assert result.status == CategoryStatus.error
    assert result.error_kind == ErrorKind.UNKNOWN
    assert result.error == "bug"
    assert response.results[TravelInfoCategory.safety].status == CategoryStatus.success


@pytest.mark.asyncio
async def test_concurrent_identical_requests_share_one_fetch(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic], delay=0.01)
    service = TravelInfoService([source], cache, settings)

    first, second = await asyncio.gather(
        service.resolve_travel_info("パリ", ["basic"]),
        service.resolve_travel_info("パリ", ["basic"]),
    )

    assert len(source.calls) == 1
    assert first.results[TravelInfoCategory.basic].data == second.results[
        TravelInfoCategory.basic
    ].data
    assert first.results[TravelInfoCategory.basic] is not second.results[
        TravelInfoCategory.basic
    ]


@pytest.mark.asyncio
async def test_invalidate_destination(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], cache, settings)
    await service.resolve_travel_info("パリ", ["basic"])
    await service.resolve_travel_info("ローマ", ["basic"])

    removed = await service.invalidate(destination="パリ")
    await service.resolve_travel_info("パリ", ["basic"])
    await service.resolve_travel_info("ローマ", ["basic"])

    assert removed == 1
    assert [c[0] for c in source.calls] == ["パリ", "ローマ", "パリ"]


@pytest.mark.asyncio
async def test_invalidate_category_includes_keys_with_options(settings, cache):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], cache, settings)
    await service.resolve_travel_info("パリ", ["basic"])
    await service.resolve_travel_info("Springfield", ["basic"], {"country": "アメリカ"})

    assert await service.invalidate(category="basic") == 2
    assert await cache.keys() == []


@pytest.mark.asyncio
async def test_without_cache(settings):
    source = FakeSource("countries", [TravelInfoCategory.basic])
    service = TravelInfoService([source], None, settings)

    await service.resolve_travel_info("パリ", ["basic"])
    await service.resolve_travel_info("パリ", ["basic"])

    assert len(source.calls) == 2
    assert await service.invalidate() == 0
    assert service.cache_stats().hits == 0


@pytest.mark.asyncio
async def test_cache_stats(settings, cache):
    service = TravelInfoService(
        [FakeSource("countries", [TravelInfoCategory.basic])], cache, settings
    )
    await service.resolve_travel_info("パリ", ["basic"])
    await service.resolve_travel_info("パリ", ["basic"])

    stats = service.cache_stats()
    assert stats.hits == 1
    assert stats.misses == 1
    assert stats.size == 1


@pytest.mark.asyncio
async def test_create_default_service(settings, make_client):
    client = make_client(lambda request: None)
    service = create_default_service(settings, client=client)

    assert [s.source_name for s in service.sources_for(TravelInfoCategory.safety)] == [
        "外務省海外安全情報"
    ]
    assert [s.source_name for s in service.sources_for(TravelInfoCategory.basic)] == [
        "REST Countries"
    ]
    assert [s.source_name for s in service.sources_for(TravelInfoCategory.climate)] == [
        "Open-Meteo"
    ]
    assert service.sources_for(TravelInfoCategory.visa) == []
    assert service.cache.file is not None

    await service.aclose()
    assert client.is_closed is False
    await client.aclose()
