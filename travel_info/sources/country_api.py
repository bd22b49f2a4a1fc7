"""Basic country information from the REST Countries API."""

import asyncio
import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from travel_info.config import Settings, get_settings
from travel_info.errors import InvalidResponseError, TravelInfoServiceError
from travel_info.exec.retry import fetch_with_retry
from travel_info.exec.types import RetryPolicy, SleepFunc
from travel_info.models.common import (
    SourceResult,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    create_source_metadata,
)
from travel_info.models.response import ResolveOptions
from travel_info.models.travel_info import BasicCountryInfo, CurrencyInfo
from travel_info.resolver.destination import get_english_name_by_code, resolve
from travel_info.sources.base import failure_from_error

logger = logging.getLogger(__name__)

SOURCE_NAME = "REST Countries"
RELIABILITY_SCORE = 90
DEFAULT_RELIABILITY_SCORE = 50
NO_TIME_DIFFERENCE = "時差なし"

_UTC_OFFSET = re.compile(r"^UTC(?:([+-])(\d{1,2})(?::?(\d{2}))?)?$")


def parse_utc_offset(timezone: str) -> float | None:
    """Parse ``UTC``, ``UTC+09:00`` or ``UTC-03:30`` into hours."""
    match = _UTC_OFFSET.match(timezone.strip())
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    if sign is None:
        return 0.0
    offset = int(hours) + int(minutes or 0) / 60
    return -offset if sign == "-" else offset


def calculate_time_difference(timezone: str, reference_offset_hours: float = 9.0) -> str | None:
    """Human-readable difference between a timezone and the reference offset.

    Whole hours render as ``-14時間``, fractional ones with one decimal
    (``-3.5時間``), and zero as ``時差なし``. Unparsable timezones give None.
    """
    offset = parse_utc_offset(timezone)
    if offset is None:
        return None
    diff = offset - reference_offset_hours
    if diff == 0:
        return NO_TIME_DIFFERENCE
    if diff.is_integer():
        return f"{int(diff):+d}時間"
    return f"{diff:+.1f}時間"


def _first_currency(currencies: Any) -> CurrencyInfo | None:
    if not isinstance(currencies, dict) or not currencies:
        return None
    code, details = next(iter(currencies.items()))
    details = details if isinstance(details, dict) else {}
    return CurrencyInfo(
        code=code, name=details.get("name") or code, symbol=details.get("symbol")
    )


def _check_json(response: httpx.Response) -> None:
    try:
        response.json()
    except ValueError as e:
        raise InvalidResponseError(f"Response is not JSON: {e}", SOURCE_NAME) from e


class CountryApiSource:
    """Currency, languages, timezone and time difference for a country."""

    source_name = SOURCE_NAME
    source_type = SourceType.official_api
    reliability_score = RELIABILITY_SCORE
    supported_categories = (TravelInfoCategory.basic,)
    cache_ttl_seconds: int | None = None

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
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

    def query_name(self, destination: str, options: ResolveOptions) -> str:
        """Country name to query: English name when resolvable, else the raw text."""
        query = options.country or destination
        code = resolve(query)
        return (get_english_name_by_code(code) if code else None) or query

    async def fetch(
        self, destination: str, options: ResolveOptions | None = None
    ) -> SourceResult:
        """Fetch basic info, falling back from exact to partial name search."""
        options = options or ResolveOptions()
        name = self.query_name(destination, options)
        url = f"{self.settings.country_api_base_url}/name/{quote(name)}"
        timeout_s = options.timeout_s or self.settings.country_api_timeout_s
        logger.info("Fetching country info for %s", name)

        try:
            response = await self._get(url, timeout_s, params={"fullText": "true"})
            if response is None:
                logger.info("No exact match for %s, trying partial search", name)
                response = await self._get(url, timeout_s)
        except TravelInfoServiceError as e:
            logger.error("Country API failed for %s: %s", name, e)
            return failure_from_error(e)

        if response is None:
            logger.warning("Country not found: %s", name)
            return self._default_result(name)

        try:
            info = self._parse(response.json(), name)
        except InvalidResponseError as e:
            logger.warning("Country API returned an unexpected payload: %s", e)
            return self._default_result(name)

        source = create_source_metadata(
            source_type=self.source_type,
            source_name=self.source_name,
            reliability_score=self.reliability_score,
            source_url=str(response.url),
            response_data=info.model_dump(mode="json"),
        )
        return SourceSuccess(data=info, source=source)

    async def is_available(self) -> bool:
        try:
            response = await self._get_client().get(
                f"{self.settings.country_api_base_url}/alpha/jp", timeout=5.0
            )
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning("Country API health check failed: %s", e)
            return False

    async def _get(
        self, url: str, timeout_s: float, params: dict[str, str] | None = None
    ) -> httpx.Response | None:
        return await fetch_with_retry(
            self._get_client(),
            url,
            policy=self.policy,
            timeout_s=timeout_s,
            source_name=self.source_name,
            headers={"Accept": "application/json", "User-Agent": self.settings.user_agent},
            params=params,
            validate=_check_json,
            sleep=self._sleep,
        )

    def _parse(self, payload: Any, name: str) -> BasicCountryInfo:
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            raise InvalidResponseError("Expected a non-empty list of countries", SOURCE_NAME)
        country = payload[0]
        names = country.get("name") or {}
        timezones = country.get("timezones") or []
        capitals = country.get("capital") or []
        languages = country.get("languages") or {}
        timezone = timezones[0] if timezones else None

        return BasicCountryInfo(
            country_name=names.get("common") or name,
            official_name=names.get("official"),
            capital=capitals[0] if capitals else None,
            region=country.get("region"),
            subregion=country.get("subregion"),
            currency=_first_currency(country.get("currencies")),
            languages=list(languages.values()) if isinstance(languages, dict) else [],
            timezone=timezone,
            time_difference=(
                calculate_time_difference(timezone, self.settings.reference_utc_offset_hours)
                if timezone
                else None
            ),
        )

    def _default_result(self, name: str) -> SourceSuccess[BasicCountryInfo]:
        info = BasicCountryInfo(country_name=name)
        source = create_source_metadata(
            source_type=SourceType.default,
            source_name=f"{self.source_name}（デフォルト）",
            reliability_score=DEFAULT_RELIABILITY_SCORE,
            source_url=self.settings.country_api_base_url,
            response_data=info.model_dump(mode="json"),
        )
        return SourceSuccess(data=info, source=source)


def create_country_source(
    settings: Settings | None = None, *, client: httpx.AsyncClient | None = None
) -> CountryApiSource:
    return CountryApiSource(settings, client=client)
