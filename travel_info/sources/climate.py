"""Near-term climate from the Open-Meteo geocoding and forecast APIs."""

import asyncio
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

import httpx

from travel_info.config import Settings, get_settings
from travel_info.errors import ErrorKind, InvalidResponseError, TravelInfoServiceError
from travel_info.exec.retry import fetch_with_retry
from travel_info.exec.types import RetryPolicy, SleepFunc
from travel_info.models.common import (
    SourceFailure,
    SourceResult,
    SourceSuccess,
    SourceType,
    TravelInfoCategory,
    create_source_metadata,
)
from travel_info.models.response import ResolveOptions
from travel_info.models.travel_info import ClimateInfo, DailyForecast
from travel_info.resolver.destination import (
    get_country_name_by_code,
    get_english_name_by_code,
    resolve,
)
from travel_info.sources.base import failure_from_error

logger = logging.getLogger(__name__)

SOURCE_NAME = "Open-Meteo"
RELIABILITY_SCORE = 80
DEFAULT_FORECAST_DAYS = 7
# Open-Meteo serves at most 16 days of daily forecast
FORECAST_HORIZON_DAYS = 16
UNKNOWN_CONDITIONS = "不明"

# WMO weather interpretation codes
WEATHER_CODE_DESCRIPTIONS: dict[int, str] = {
    0: "快晴",
    1: "晴れ",
    2: "一部曇り",
    3: "曇り",
    45: "霧",
    48: "霧",
    51: "霧雨",
    53: "霧雨",
    55: "霧雨",
    56: "着氷性の霧雨",
    57: "着氷性の霧雨",
    61: "雨",
    63: "雨",
    65: "強い雨",
    66: "着氷性の雨",
    67: "着氷性の雨",
    71: "雪",
    73: "雪",
    75: "大雪",
    77: "霧雪",
    80: "にわか雨",
    81: "にわか雨",
    82: "激しいにわか雨",
    85: "にわか雪",
    86: "にわか雪",
    95: "雷雨",
    96: "雹を伴う雷雨",
    99: "雹を伴う雷雨",
}


def describe_weather_code(code: Any) -> str:
    try:
        return WEATHER_CODE_DESCRIPTIONS.get(int(code), UNKNOWN_CONDITIONS)
    except (TypeError, ValueError):
        return UNKNOWN_CONDITIONS


def recommend_clothing(forecast: list[DailyForecast]) -> list[str]:
    """Clothing advice from average daily highs and any rainy day."""
    highs = [day.temp_max_c for day in forecast if day.temp_max_c is not None]
    if not highs:
        return []

    average_high = sum(highs) / len(highs)
    if average_high >= 25:
        clothing = ["半袖・通気性の良い服", "帽子・サングラスなどの日差し対策"]
    elif average_high >= 15:
        clothing = ["長袖シャツ", "薄手の上着"]
    elif average_high >= 5:
        clothing = ["セーターなどの重ね着", "コート"]
    else:
        clothing = ["厚手のコート", "手袋・マフラー・帽子"]

    if any((day.precipitation_mm or 0) >= 1.0 for day in forecast):
        clothing.append("折りたたみ傘・レインウェア")
    return clothing


def _value_at(values: list[Any] | None, index: int) -> Any:
    if not values or index >= len(values):
        return None
    return values[index]


def parse_daily_forecast(daily: dict[str, Any]) -> list[DailyForecast]:
    """Parse Open-Meteo's column-oriented ``daily`` block."""
    days = daily.get("time")
    if not isinstance(days, list):
        raise InvalidResponseError("Forecast has no daily time series", SOURCE_NAME)

    forecast = []
    for i, day in enumerate(days):
        forecast.append(
            DailyForecast(
                forecast_date=date.fromisoformat(day),
                temp_max_c=_value_at(daily.get("temperature_2m_max"), i),
                temp_min_c=_value_at(daily.get("temperature_2m_min"), i),
                precipitation_mm=_value_at(daily.get("precipitation_sum"), i),
                conditions=describe_weather_code(_value_at(daily.get("weather_code"), i)),
            )
        )
    return forecast


class OpenMeteoClimateSource:
    """Current conditions, daily forecast and clothing advice."""

    source_name = SOURCE_NAME
    source_type = SourceType.official_api
    reliability_score = RELIABILITY_SCORE
    supported_categories = (TravelInfoCategory.climate,)
    cache_ttl_seconds: int | None = None

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings or get_settings()
        self.policy = RetryPolicy(
            max_retries=self.settings.max_retries,
            base_delay_s=self.settings.retry_delay_s,
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self._today = today

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def geocoding_query(self, destination: str) -> str:
        """English country name for bare country names, else the destination."""
        code = resolve(destination)
        if code is not None and get_country_name_by_code(code) == destination:
            return get_english_name_by_code(code) or destination
        return destination

    def forecast_window(self, options: ResolveOptions) -> dict[str, Any]:
        """Requested dates clipped to the forecast horizon, or the next week."""
        today = self._today()
        horizon = today + timedelta(days=FORECAST_HORIZON_DAYS - 1)
        if options.dates is not None:
            start = max(options.dates.start, today)
            end = min(options.dates.end, horizon)
            if start <= end:
                return {"start_date": start.isoformat(), "end_date": end.isoformat()}
            logger.info(
                "Travel dates are outside the forecast horizon, using next %d days",
                DEFAULT_FORECAST_DAYS,
            )
        return {"forecast_days": DEFAULT_FORECAST_DAYS}

    async def fetch(
        self, destination: str, options: ResolveOptions | None = None
    ) -> SourceResult:
        options = options or ResolveOptions()
        timeout_s = options.timeout_s or self.settings.climate_api_timeout_s
        query = self.geocoding_query(destination)
        logger.info("Fetching climate for %s", query)

        try:
            location = await self._geocode(query, timeout_s)
            if location is None:
                return SourceFailure(
                    error_kind=ErrorKind.NOT_FOUND,
                    message=f"Location not found: {destination}",
                )
            response = await self._get(
                self.settings.forecast_api_url,
                timeout_s,
                params={
                    "latitude": location["latitude"],
                    "longitude": location["longitude"],
                    "current": "temperature_2m,weather_code",
                    "daily": "weather_code,temperature_2m_max,temperature_2m_min,precipitation_sum",
                    "timezone": "auto",
                    **self.forecast_window(options),
                },
            )
            if response is None:
                return SourceFailure(
                    error_kind=ErrorKind.NOT_FOUND,
                    message=f"No forecast for {destination}",
                )
            info = self._parse_forecast(response.json(), location, destination)
        except TravelInfoServiceError as e:
            logger.error("Climate fetch failed for %s: %s", destination, e)
            return failure_from_error(e)

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
                self.settings.geocoding_api_url,
                params={"name": "Tokyo", "count": 1},
                timeout=5.0,
            )
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning("Climate API health check failed: %s", e)
            return False

    async def _get(
        self, url: str, timeout_s: float, params: dict[str, Any]
    ) -> httpx.Response | None:
        return await fetch_with_retry(
            self._get_client(),
            url,
            policy=self.policy,
            timeout_s=timeout_s,
            source_name=self.source_name,
            headers={"User-Agent": self.settings.user_agent},
            params=params,
            validate=_check_json_object,
            sleep=self._sleep,
        )

    async def _geocode(self, query: str, timeout_s: float) -> dict[str, Any] | None:
        response = await self._get(
            self.settings.geocoding_api_url,
            timeout_s,
            params={"name": query, "count": 1, "language": "ja", "format": "json"},
        )
        if response is None:
            return None
        results = response.json().get("results") or []
        for result in results:
            if "latitude" in result and "longitude" in result:
                return result
        return None

    def _parse_forecast(
        self, payload: dict[str, Any], location: dict[str, Any], destination: str
    ) -> ClimateInfo:
        daily = payload.get("daily")
        if not isinstance(daily, dict):
            raise InvalidResponseError("Forecast has no daily block", SOURCE_NAME)
        try:
            forecast = parse_daily_forecast(daily)
        except (TypeError, ValueError) as e:
            raise InvalidResponseError(f"Malformed daily forecast: {e}", SOURCE_NAME) from e

        current = payload.get("current") or {}
        current_code = current.get("weather_code")
        return ClimateInfo(
            location_name=location.get("name") or destination,
            current_temperature_c=current.get("temperature_2m"),
            current_conditions=(
                describe_weather_code(current_code) if current_code is not None else None
            ),
            forecast=forecast,
            recommended_clothing=recommend_clothing(forecast),
        )


def _check_json_object(response: httpx.Response) -> None:
    try:
        payload = response.json()
    except ValueError as e:
        raise InvalidResponseError(f"Response is not JSON: {e}", SOURCE_NAME) from e
    if not isinstance(payload, dict):
        raise InvalidResponseError("Expected a JSON object", SOURCE_NAME)


def create_climate_source(
    settings: Settings | None = None, *, client: httpx.AsyncClient | None = None
) -> OpenMeteoClimateSource:
    return OpenMeteoClimateSource(settings, client=client)
