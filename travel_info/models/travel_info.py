"""Models for per-category travel information payloads."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

DANGER_LEVEL_DESCRIPTIONS: dict[int, str] = {
    0: "危険情報なし",
    1: "十分注意してください",
    2: "不要不急の渡航は止めてください",
    3: "渡航は止めてください（渡航中止勧告）",
    4: "退避してください（退避勧告）",
}

MAX_WARNINGS = 5


class HighRiskRegion(BaseModel):
    """Region whose danger level exceeds the requested destination's."""

    region_name: str = Field(description="Region name")
    level: int = Field(ge=1, le=4, description="Danger level of the region")
    description: str | None = Field(default=None, description="Short risk summary")


class EmergencyContact(BaseModel):
    """Local emergency number."""

    model_config = ConfigDict(frozen=True)

    name: str
    number: str


class Embassy(BaseModel):
    """Japanese embassy or consulate."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    phone: str


class SafetyInfo(BaseModel):
    """Safety advisory resolved for a destination."""

    danger_level: int = Field(ge=0, le=4, description="Level for the destination")
    max_country_level: int = Field(
        ge=0, le=4, description="Highest level reported anywhere in the country"
    )
    danger_level_description: str = Field(description="Text of danger_level")
    lead: str | None = Field(default=None, description="Feed lead text")
    sub_text: str | None = Field(default=None, description="Feed summary text")
    is_partial_country_risk: bool = Field(
        default=False, description="Destination is below the country maximum"
    )
    high_risk_regions: list[HighRiskRegion] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    emergency_contacts: list[EmergencyContact] = Field(default_factory=list)
    nearest_embassy: Embassy | None = None
    infection_level: int = Field(
        default=0, ge=0, le=4, description="Infectious disease advisory level"
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_fields(cls, data):
        """Fill derived fields and dedupe warnings before validation."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        level = data.get("danger_level", 0)
        data.setdefault("max_country_level", level)
        data.setdefault("danger_level_description", DANGER_LEVEL_DESCRIPTIONS.get(level, ""))
        data["is_partial_country_risk"] = level < data["max_country_level"]
        warnings: list[str] = []
        for warning in data.get("warnings") or []:
            if warning and warning not in warnings:
                warnings.append(warning)
        data["warnings"] = warnings[:MAX_WARNINGS]
        return data

    @model_validator(mode="after")
    def _check_levels(self) -> SafetyInfo:
        if self.danger_level > self.max_country_level:
            raise ValueError(
                f"danger_level {self.danger_level} exceeds max_country_level "
                f"{self.max_country_level}"
            )
        return self


class CurrencyInfo(BaseModel):
    """Currency used in a country."""

    code: str
    name: str
    symbol: str | None = None


class BasicCountryInfo(BaseModel):
    """Basic country reference data."""

    country_name: str = Field(description="Common country name")
    official_name: str | None = None
    capital: str | None = None
    region: str | None = None
    subregion: str | None = None
    currency: CurrencyInfo | None = None
    languages: list[str] = Field(default_factory=list)
    timezone: str | None = Field(default=None, description="First listed timezone")
    time_difference: str | None = Field(
        default=None, description="Difference from the reference offset, e.g. -14時間"
    )


class DailyForecast(BaseModel):
    """Forecast for a single day."""

    forecast_date: date
    temp_max_c: float | None = None
    temp_min_c: float | None = None
    precipitation_mm: float | None = None
    conditions: str = "不明"


class ClimateInfo(BaseModel):
    """Near-term climate for a destination."""

    location_name: str
    current_temperature_c: float | None = None
    current_conditions: str | None = None
    forecast: list[DailyForecast] = Field(default_factory=list)
    recommended_clothing: list[str] = Field(default_factory=list)
