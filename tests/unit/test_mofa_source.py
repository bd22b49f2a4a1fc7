"""Tests for the MOFA safety feed source."""

import httpx
import pytest

from travel_info.cache.memory import MemoryCache
from travel_info.disambiguation.risk import RiskAssessment, RiskDisambiguator
from travel_info.errors import InvalidResponseError
from travel_info.models.common import SourceType
from travel_info.models.response import ResolveOptions
from travel_info.models.travel_info import HighRiskRegion
from travel_info.sources.mofa import (
    DEFAULT_WARNINGS,
    NO_NOTICE_WARNINGS,
    PARSE_ERROR_WARNING,
    MofaSafetySource,
    parse_opendata,
)

THAILAND_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<opendata>
  <riskLevel1>1</riskLevel1>
  <riskLevel2>1</riskLevel2>
  <riskLevel3>0</riskLevel3>
  <riskLevel4>0</riskLevel4>
  <infectionLevel1>1</infectionLevel1>
  <riskLead>南部国境地帯には不要不急の渡航中止が出ています</riskLead>
  <riskSubText>ナラティワート県、ヤラー県、パッタニー県</riskSubText>
  <wideareaSpot><title>デモに関する注意喚起</title></wideareaSpot>
  <mail><title>爆発事件に関する注意喚起</title></mail>
</opendata>
"""

QUIET_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<opendata>
  <riskLevel1>N</riskLevel1>
  <riskLevel2>N</riskLevel2>
  <riskLevel3>N</riskLevel3>
  <riskLevel4>N</riskLevel4>
</opendata>
"""


class StubClassifier:
    def __init__(self, assessment):
        self.assessment = assessment
        self.requests = []

    async def classify_risk(self, request):
        self.requests.append(request)
        return self.assessment


def _feed_handler(body, status=200):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status, text=body)

    return handler, requests


@pytest.fixture
def make_source(settings, make_client, no_sleep):
    def _make(handler, **kwargs):
        return MofaSafetySource(settings, client=make_client(handler), sleep=no_sleep, **kwargs)

    return _make


def test_parse_levels_and_warnings():
    snapshot = parse_opendata(THAILAND_FEED)

    assert snapshot.danger_level == 2
    assert snapshot.infection_level == 1
    assert snapshot.lead.startswith("南部国境地帯")
    assert snapshot.warnings == [
        "南部国境地帯には不要不急の渡航中止が出ています",
        "デモに関する注意喚起",
        "爆発事件に関する注意喚起",
    ]


def test_parse_no_flags_set():
    snapshot = parse_opendata(QUIET_FEED)

    assert snapshot.danger_level == 0
    assert snapshot.infection_level == 0
    assert snapshot.warnings == list(NO_NOTICE_WARNINGS)


def test_parse_caps_warnings():
    spots = "".join(f"<mail><title>notice {i}</title></mail>" for i in range(10))
    snapshot = parse_opendata(f"<opendata><riskLead>lead</riskLead>{spots}</opendata>")

    assert len(snapshot.warnings) == 5
    assert snapshot.warnings[0] == "lead"


def test_parse_ignores_nested_notices():
    feed = (
        "<opendata><riskLead>lead</riskLead>"
        "<mail><title>top</title></mail>"
        "<archive><mail><title>old</title></mail></archive>"
        "</opendata>"
    )

    assert parse_opendata(feed).warnings == ["lead", "top"]


@pytest.mark.parametrize("body", ["<opendata><riskLevel1>", "<html><body/></html>"])
def test_parse_rejects_malformed_documents(body):
    with pytest.raises(InvalidResponseError):
        parse_opendata(body)


def test_urls(settings):
    source = MofaSafetySource(settings)

    assert source.feed_url("0066") == "https://www.ezairyu.mofa.go.jp/opendata/country/0066A.xml"
    assert source.page_url("0066").endswith("pcinfectionspothazardinfo_66.html")


@pytest.mark.asyncio
async def test_country_destination_uses_feed_level(make_source):
    handler, requests = _feed_handler(THAILAND_FEED)
    source = make_source(handler)

    result = await source.fetch("タイ")

    assert result.ok is True
    assert str(requests[0].url).endswith("/country/0066A.xml")
    info = result.data
    assert info.danger_level == 2
    assert info.max_country_level == 2
    assert info.is_partial_country_risk is False
    assert info.danger_level_description == "不要不急の渡航は止めてください"
    assert ("警察", "191") in [(c.name, c.number) for c in info.emergency_contacts]
    assert info.nearest_embassy.name == "在タイ日本国大使館"
    assert result.source.source_type == SourceType.official_api
    assert result.source.reliability_score == 95
    assert result.source.response_digest is not None


@pytest.mark.asyncio
async def test_city_without_ai_uses_heuristic(make_source):
    handler, _ = _feed_handler(THAILAND_FEED)
    source = make_source(handler)

    info = (await source.fetch("バンコク")).data

    assert info.danger_level == 0
    assert info.max_country_level == 2
    assert info.is_partial_country_risk is True


@pytest.mark.asyncio
async def test_city_with_classifier(make_source):
    classifier = StubClassifier(
        RiskAssessment(
            specific_level=1,
            max_country_level=3,
            high_risk_regions=[
                HighRiskRegion(region_name="南部国境地帯", level=3),
                HighRiskRegion(region_name="南部国境地帯", level=3),
                HighRiskRegion(region_name="チェンマイ", level=1),
            ],
            method="ai",
        )
    )
    handler, _ = _feed_handler(THAILAND_FEED)
    source = make_source(handler, disambiguator=RiskDisambiguator(classifier))

    info = (await source.fetch("バンコク")).data

    assert classifier.requests[0].destination == "バンコク"
    assert classifier.requests[0].country_name == "タイ"
    assert classifier.requests[0].max_level == 2
    assert info.danger_level == 1
    assert info.max_country_level == 3
    assert [r.region_name for r in info.high_risk_regions] == ["南部国境地帯"]


@pytest.mark.asyncio
async def test_country_hint(make_source):
    handler, requests = _feed_handler(QUIET_FEED)
    source = make_source(handler)

    await source.fetch("スプリングフィールド", ResolveOptions(country="アメリカ"))

    assert str(requests[0].url).endswith("/country/1000A.xml")


@pytest.mark.asyncio
async def test_unknown_destination_returns_default(make_source):
    handler, requests = _feed_handler(THAILAND_FEED)
    source = make_source(handler)

    result = await source.fetch("未知の国")

    assert requests == []
    assert result.ok is True
    assert result.data.danger_level == 0
    assert result.data.warnings == list(DEFAULT_WARNINGS)
    assert result.source.source_type == SourceType.default
    assert "デフォルト" in result.source.source_name
    assert result.source.reliability_score == 50


@pytest.mark.asyncio
async def test_missing_feed_returns_default(make_source, no_sleep):
    handler, requests = _feed_handler("not found", status=404)
    source = make_source(handler)

    result = await source.fetch("タイ")

    assert len(requests) == 1
    no_sleep.assert_not_awaited()
    assert result.data.danger_level == 0
    assert result.source.source_type == SourceType.default


@pytest.mark.asyncio
async def test_html_error_page_is_retried_then_default(make_source, no_sleep):
    handler, requests = _feed_handler("<html><body>maintenance</body></html>")
    source = make_source(handler)

    result = await source.fetch("タイ")

    assert len(requests) == 3
    assert no_sleep.await_count == 2
    assert result.source.source_type == SourceType.default


@pytest.mark.asyncio
async def test_malformed_feed_gives_parse_error_info(make_source):
    handler, requests = _feed_handler("<opendata><riskLevel1>1</opendata>")
    source = make_source(handler)

    result = await source.fetch("タイ")

    assert len(requests) == 1
    assert result.data.danger_level == 0
    assert result.data.warnings == [PARSE_ERROR_WARNING]
    assert result.data.nearest_embassy.name == "在タイ日本国大使館"


@pytest.mark.asyncio
async def test_feed_cache_prevents_second_request(make_source, clock):
    handler, requests = _feed_handler(THAILAND_FEED)
    source = make_source(handler, cache=MemoryCache(clock=clock))

    first = await source.fetch("タイ")
    second = await source.fetch("タイ")

    assert len(requests) == 1
    assert second.data == first.data

    clock.advance(301_000)
    await source.fetch("タイ")
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_is_available(make_source):
    source = make_source(lambda request: httpx.Response(200))
    assert await source.is_available() is True

    source = make_source(lambda request: httpx.Response(503))
    assert await source.is_available() is False


@pytest.mark.asyncio
async def test_level_one_flag(make_source):
    feed = QUIET_FEED.replace("<riskLevel1>N</riskLevel1>", "<riskLevel1>Y</riskLevel1>")
    handler, _ = _feed_handler(feed)
    source = make_source(handler)

    info = (await source.fetch("フランス")).data

    assert info.danger_level == 1
    assert info.danger_level_description == "十分注意してください"


@pytest.mark.asyncio
async def test_no_flags_gives_generic_advisories(make_source):
    handler, _ = _feed_handler(QUIET_FEED)
    source = make_source(handler)

    info = (await source.fetch("フランス")).data

    assert info.danger_level == 0
    assert info.max_country_level == 0
    assert info.warnings == list(NO_NOTICE_WARNINGS)
