"""Safety source backed by the MOFA overseas safety open data feed.

The feed publishes one XML document per country with four escalating
danger-level flags, free-text lead/summary, and repeatable spot and mail
notices. Country-level flags are narrowed to the requested destination by
the risk disambiguator.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET

import httpx
from pydantic import BaseModel, Field

from travel_info.cache.memory import MemoryCache
from travel_info.config import Settings, get_settings
from travel_info.disambiguation.risk import (
    OpenAIRiskClassifier,
    RiskDisambiguator,
    needs_disambiguation,
)
from travel_info.errors import InvalidResponseError, TravelInfoServiceError
from travel_info.exec.retry import fetch_with_retry
from travel_info.exec.types import RetryPolicy, SleepFunc
from travel_info.models.common import (
    SourceMetadata,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    create_source_metadata,
)
from travel_info.models.response import ResolveOptions
from travel_info.models.travel_info import MAX_WARNINGS, HighRiskRegion, SafetyInfo
from travel_info.resolver.destination import (
    get_country_name_by_code,
    get_default_emergency_contacts,
    get_embassy_by_code,
    get_emergency_contacts_by_code,
    resolve,
)

logger = logging.getLogger(__name__)

SOURCE_NAME = "外務省海外安全情報"
RELIABILITY_SCORE = 95
DEFAULT_RELIABILITY_SCORE = 50
HEALTH_CHECK_COUNTRY_CODE = "0066"
HEALTH_CHECK_TIMEOUT_S = 5.0

DEFAULT_WARNINGS: tuple[str, ...] = (
    "最新の渡航情報は外務省海外安全ホームページでご確認ください",
    "海外旅行保険への加入を強くお勧めします",
    "「たびレジ」への登録をお勧めします",
)
NO_NOTICE_WARNINGS: tuple[str, ...] = (
    "最新の渡航情報を確認してください",
    "海外旅行保険への加入を推奨します",
)
PARSE_ERROR_WARNING = (
    "データの解析中にエラーが発生しました。最新の情報を外務省ホームページでご確認ください。"
)

_FLAG_SET_VALUES = frozenset({"y", "1", "true"})


class FeedSnapshot(BaseModel):
    """Country-level fields extracted from one feed document."""

    danger_level: int = Field(ge=0, le=4)
    infection_level: int = Field(default=0, ge=0, le=4)
    lead: str | None = None
    sub_text: str | None = None
    warnings: list[str] = Field(default_factory=list)


def _child_text(element: ET.Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def _highest_flagged_level(opendata: ET.Element, prefix: str) -> int:
    """Highest of ``{prefix}4`` .. ``{prefix}1`` that is set, else 0."""
    for level in (4, 3, 2, 1):
        value = _child_text(opendata, f"{prefix}{level}")
        if value is not None and value.lower() in _FLAG_SET_VALUES:
            return level
    return 0


def _extract_warnings(opendata: ET.Element, lead: str | None) -> list[str]:
    """Lead first, then spot titles, then mail titles; deduplicated."""
    warnings: list[str] = [lead] if lead else []
    for tag in ("wideareaSpot", "mail"):
        for notice in opendata.findall(tag):
            if len(warnings) >= MAX_WARNINGS:
                break
            title = _child_text(notice, "title")
            if title and title not in warnings:
                warnings.append(title)

    if not warnings:
        warnings = list(NO_NOTICE_WARNINGS)
    return warnings[:MAX_WARNINGS]


def parse_opendata(content: bytes | str) -> FeedSnapshot:
    """Parse a feed document.

    Raises:
        InvalidResponseError: The document is not well-formed or has no
            ``opendata`` root.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    try:
        root = ET.fromstring(content.strip())
    except ET.ParseError as e:
        raise InvalidResponseError(f"Malformed XML: {e}", SOURCE_NAME) from e
    if root.tag != "opendata":
        raise InvalidResponseError(
            f"Invalid XML structure: root is <{root.tag}>", SOURCE_NAME
        )

    lead = _child_text(root, "riskLead")
    return FeedSnapshot(
        danger_level=_highest_flagged_level(root, "riskLevel"),
        infection_level=_highest_flagged_level(root, "infectionLevel"),
        lead=lead,
        sub_text=_child_text(root, "riskSubText"),
        warnings=_extract_warnings(root, lead),
    )


def _check_xml_shape(response: httpx.Response) -> None:
    """Reject HTML error pages served with a 200."""
    text = response.text.strip()
    if not text.startswith("<") or "<opendata" not in text:
        raise InvalidResponseError("Response is not an opendata XML document", SOURCE_NAME)


class MofaSafetySource:
    """Safety information from the MOFA open data feed."""

    source_name = SOURCE_NAME
    source_type = SourceType.official_api
    reliability_score = RELIABILITY_SCORE
    supported_categories = (TravelInfoCategory.safety,)

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        cache: MemoryCache | None = None,
        disambiguator: RiskDisambiguator | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the source.

        Args:
            settings: Service settings.
            client: Shared HTTP client; one is created on demand when omitted.
            cache: Adapter-level feed cache, bounded by the feed's publish cadence.
            disambiguator: Narrows country-level risk to the destination.
            sleep: Backoff sleep, injectable for tests.
        """
        self.settings = settings or get_settings()
        self.cache_ttl_seconds = self.settings.safety_feed_ttl_s
        self.cache = cache
        self.disambiguator = disambiguator or RiskDisambiguator(
            OpenAIRiskClassifier(self.settings)
        )
        self.policy = RetryPolicy(
            max_retries=self.settings.max_retries,
            base_delay_s=self.settings.retry_delay_s,
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def feed_url(self, country_code: str) -> str:
        return f"{self.settings.mofa_opendata_base_url}/country/{country_code}A.xml"

    def page_url(self, country_code: str) -> str:
        """Human-facing safety page, deep-linked by country code."""
        number = country_code.lstrip("0")
        return f"{self.settings.mofa_anzen_base_url}/info/pcinfectionspothazardinfo_{number}.html"

    async def fetch(
        self, destination: str, options: ResolveOptions | None = None
    ) -> SourceSuccess[SafetyInfo]:
        """Fetch safety info for a destination.

        Always succeeds: unknown destinations, 404s, exhausted retries and
        malformed feeds all produce default safety info.
        """
        options = options or ResolveOptions()
        logger.info("Fetching safety info for %s", destination)

        country_code = resolve(destination, options.country)
        if country_code is None:
            logger.warning("Unknown destination %s, using default safety info", destination)
            return self._default_result(destination)

        cache_key = f"mofa:safety:{country_code}:{destination}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Feed cache hit for %s", cache_key)
                info = SafetyInfo.model_validate(cached.data)
                return SourceSuccess(data=info, source=self._metadata(country_code, info))

        timeout_s = options.timeout_s or self.settings.source_timeout_s
        try:
            info = await self._fetch_from_opendata(country_code, destination, timeout_s)
        except TravelInfoServiceError as e:
            logger.error("Safety feed failed for %s: %s", destination, e)
            return self._default_result(destination)

        if info is None:
            return self._default_result(destination)

        if self.cache is not None:
            self.cache.set(
                cache_key, info.model_dump(mode="json"), ttl_seconds=self.cache_ttl_seconds
            )
        logger.info(
            "Fetched safety info for %s (level %d)", destination, info.danger_level
        )
        return SourceSuccess(data=info, source=self._metadata(country_code, info))

    async def is_available(self) -> bool:
        """Probe the feed with a HEAD request for a known country."""
        try:
            response = await self._get_client().head(
                self.feed_url(HEALTH_CHECK_COUNTRY_CODE), timeout=HEALTH_CHECK_TIMEOUT_S
            )
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning("Safety feed health check failed: %s", e)
            return False

    async def _fetch_from_opendata(
        self, country_code: str, destination: str, timeout_s: float
    ) -> SafetyInfo | None:
        """Fetch and interpret the feed; None when the country has no feed."""
        response = await fetch_with_retry(
            self._get_client(),
            self.feed_url(country_code),
            policy=self.policy,
            timeout_s=timeout_s,
            source_name=self.source_name,
            headers={
                "Accept": "application/xml, text/xml",
                "User-Agent": self.settings.user_agent,
            },
            validate=_check_xml_shape,
            sleep=self._sleep,
        )
        if response is None:
            logger.warning("No safety feed for country %s", country_code)
            return None

        try:
            snapshot = parse_opendata(response.content)
        except InvalidResponseError as e:
            logger.error("Safety feed parse error for %s: %s", country_code, e)
            return self._parse_error_info(country_code)

        return await self._build_safety_info(snapshot, country_code, destination)

    async def _build_safety_info(
        self, snapshot: FeedSnapshot, country_code: str, destination: str
    ) -> SafetyInfo:
        specific_level = snapshot.danger_level
        max_level = snapshot.danger_level
        regions: list[HighRiskRegion] = []

        country_name = get_country_name_by_code(country_code)
        if needs_disambiguation(snapshot.danger_level, destination, country_name):
            text = "\n".join(t for t in (snapshot.lead, snapshot.sub_text) if t)
            assessment = await self.disambiguator.assess(
                text, destination, country_name, snapshot.danger_level
            )
            specific_level = assessment.specific_level
            max_level = assessment.max_country_level
            regions = assessment.high_risk_regions

        return SafetyInfo(
            danger_level=specific_level,
            max_country_level=max_level,
            lead=snapshot.lead,
            sub_text=snapshot.sub_text,
            high_risk_regions=regions,
            warnings=snapshot.warnings,
            emergency_contacts=get_emergency_contacts_by_code(country_code),
            nearest_embassy=get_embassy_by_code(country_code),
            infection_level=snapshot.infection_level,
        )

    def _parse_error_info(self, country_code: str) -> SafetyInfo:
        return SafetyInfo(
            danger_level=0,
            warnings=[PARSE_ERROR_WARNING],
            emergency_contacts=get_default_emergency_contacts(),
            nearest_embassy=get_embassy_by_code(country_code),
        )

    def _metadata(self, country_code: str, info: SafetyInfo) -> SourceMetadata:
        return create_source_metadata(
            source_type=self.source_type,
            source_name=self.source_name,
            reliability_score=self.reliability_score,
            source_url=self.page_url(country_code),
            response_data=info.model_dump(mode="json"),
        )

    def _default_result(self, destination: str) -> SourceSuccess[SafetyInfo]:
        """Level-0 advisory with generic warnings and consular contacts."""
        logger.info("Using default safety info for %s", destination)
        info = SafetyInfo(
            danger_level=0,
            warnings=list(DEFAULT_WARNINGS),
            emergency_contacts=get_default_emergency_contacts(),
        )
        source = create_source_metadata(
            source_type=SourceType.default,
            source_name=f"{self.source_name}（デフォルト）",
            reliability_score=DEFAULT_RELIABILITY_SCORE,
            source_url=self.settings.mofa_anzen_base_url,
            response_data=info.model_dump(mode="json"),
        )
        return SourceSuccess(data=info, source=source)


def create_mofa_source(
    settings: Settings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    with_cache: bool = True,
) -> MofaSafetySource:
    """Build a safety source with its own feed cache."""
    settings = settings or get_settings()
    cache = None
    if with_cache:
        cache = MemoryCache(
            max_entries=settings.memory_cache_max_entries,
            default_ttl_ms=settings.safety_feed_ttl_s * 1000,
            cleanup_interval_s=settings.cache_cleanup_interval_s,
        )
    return MofaSafetySource(settings, client=client, cache=cache)
