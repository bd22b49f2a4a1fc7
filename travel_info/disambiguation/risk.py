"""Destination-level risk from country-level safety advisories.

The MOFA feed reports danger levels per country. When the user asked about a
city or region, an AI classifier estimates the level for that destination and
names the higher-risk regions. Without credentials, or when the call fails, a
deterministic keyword heuristic is used instead.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from travel_info.config import Settings, get_settings, is_ai_configured
from travel_info.errors import ErrorKind
from travel_info.models.travel_info import HighRiskRegion

logger = logging.getLogger(__name__)

WHOLE_COUNTRY_KEYWORDS: tuple[str, ...] = (
    "全土",
    "全域",
    "国全土",
    "国内全域",
    "nationwide",
    "entire country",
    "whole country",
    "all regions",
)


class RiskRequest(BaseModel):
    """Input for destination-level risk classification."""

    text: str = Field(description="Feed lead and sub-text")
    destination: str = Field(description="Requested city or region")
    country_name: str = Field(description="Canonical country name")
    max_level: int = Field(ge=0, le=4, description="Country level reported by the feed")


class RiskAssessment(BaseModel):
    """Destination-level risk estimate."""

    specific_level: int = Field(ge=0, le=4, description="Level for the destination")
    max_country_level: int = Field(ge=0, le=4, description="Highest level in the country")
    high_risk_regions: list[HighRiskRegion] = Field(default_factory=list)
    reason: str | None = None
    method: Literal["ai", "heuristic"] = "heuristic"


class RiskClassifier(Protocol):
    """Classifies the risk of a destination inside a country."""

    async def classify_risk(self, request: RiskRequest) -> RiskAssessment | None:
        """Return an assessment, or None when classification is unavailable."""
        ...


# OpenAI function schema for risk classification
CLASSIFY_RISK_FUNCTION = {
    "name": "classify_destination_risk",
    "description": "Report the danger level for a destination inside a country",
    "parameters": {
        "type": "object",
        "properties": {
            "specificLevel": {
                "type": "integer",
                "minimum": 0,
                "maximum": 4,
                "description": "The danger level (0-4) specifically for the target destination.",
            },
            "maxCountryLevel": {
                "type": "integer",
                "minimum": 0,
                "maximum": 4,
                "description": "The maximum danger level mentioned for the entire country.",
            },
            "highRiskRegions": {
                "type": "array",
                "description": (
                    "Regions with danger levels higher than the target destination. "
                    "Only regions explicitly mentioned in the text with specific levels."
                ),
                "items": {
                    "type": "object",
                    "properties": {
                        "regionName": {
                            "type": "string",
                            "description": "Name of the high-risk region in Japanese.",
                        },
                        "level": {
                            "type": "integer",
                            "minimum": 1,
                            "maximum": 4,
                            "description": "Danger level for this region.",
                        },
                        "description": {
                            "type": "string",
                            "description": "Brief description of the risk in Japanese.",
                        },
                    },
                    "required": ["regionName", "level"],
                },
            },
            "reason": {
                "type": "string",
                "description": "The reasoning for the decision.",
            },
        },
        "required": ["specificLevel", "maxCountryLevel", "highRiskRegions", "reason"],
    },
}


SYSTEM_PROMPT = """You are a travel safety analyst. You read safety advisories published by the Ministry of Foreign Affairs of Japan (MOFA) and decide how they apply to a specific destination.

Danger levels:
- Level 0: No danger information
- Level 1: Exercise caution (十分注意)
- Level 2: Avoid non-essential travel (不要不急の渡航中止)
- Level 3: Do not travel (渡航中止勧告)
- Level 4: Evacuate (退避勧告)

Rules:
- If the text explicitly mentions the destination with a level, use that level.
- If the text says the whole country (全土/全域) has a level, apply it to the destination.
- If the text names high risks for other regions but not the destination or the whole country, assume the destination is safer (likely level 0 or 1).
- Capitals and major tourist cities often have lower risk than border regions.
- maxCountryLevel must be greater than or equal to specificLevel.
- Only list high-risk regions whose level is higher than the destination's, with names in Japanese. Return an empty list when the destination has the country maximum.

Always answer by calling classify_destination_risk.
"""


def _build_user_prompt(request: RiskRequest) -> str:
    return (
        "Information Source: MOFA Open Data\n"
        f"Country: {request.country_name}\n"
        f"Target Destination: {request.destination}\n"
        f"MOFA XML Reported Max Level: {request.max_level}\n\n"
        f'Text (Lead & SubText):\n"""\n{request.text}\n"""'
    )


def _clamp(value: Any, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


def _assessment_from_arguments(args: dict[str, Any]) -> RiskAssessment:
    """Build an assessment from function-call arguments, clamping levels."""
    regions = [
        HighRiskRegion(
            region_name=str(region["regionName"]),
            level=_clamp(region["level"], 1, 4),
            description=region.get("description") or None,
        )
        for region in args.get("highRiskRegions") or []
        if region.get("regionName")
    ]
    return RiskAssessment(
        specific_level=_clamp(args["specificLevel"], 0, 4),
        max_country_level=_clamp(args["maxCountryLevel"], 0, 4),
        high_risk_regions=regions,
        reason=args.get("reason"),
        method="ai",
    )


class OpenAIRiskClassifier:
    """Risk classifier backed by an OpenAI chat completion with a forced tool call."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or is_ai_configured(self.settings)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.ai_timeout_s,
            )
        return self._client

    async def classify_risk(self, request: RiskRequest) -> RiskAssessment | None:
        """Ask the model for a destination-level assessment.

        Returns:
            The assessment, or None when no API key is configured or the call
            or its output is unusable.
        """
        if not self.enabled:
            logger.debug(
                "Risk classification skipped",
                extra={"error_kind": ErrorKind.AI_UNAVAILABLE.value},
            )
            return None

        try:
            response = await self._get_client().chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": _build_user_prompt(request)},
                ],
                tools=[{"type": "function", "function": CLASSIFY_RISK_FUNCTION}],
                tool_choice={
                    "type": "function",
                    "function": {"name": CLASSIFY_RISK_FUNCTION["name"]},
                },
                temperature=0,
            )
            tool_calls = response.choices[0].message.tool_calls
            if not tool_calls:
                logger.warning("Risk classifier returned no tool call")
                return None
            args = json.loads(tool_calls[0].function.arguments)
            return _assessment_from_arguments(args)
        except Exception as e:
            logger.warning(
                "Risk classification failed for %s: %s", request.destination, e
            )
            return None


def needs_disambiguation(
    feed_level: int, destination: str, country_name: str | None
) -> bool:
    """True when a country-level advisory must be narrowed to a sub-region.

    That is the case when the feed reports some risk and the destination is
    neither the country itself nor a string containing the country name.
    """
    if feed_level <= 0 or not country_name:
        return False
    return destination != country_name and country_name not in destination


def heuristic_assessment(text: str, destination: str, max_level: int) -> RiskAssessment:
    """Deterministic fallback when AI classification is skipped or fails.

    Whole-country keywords apply the country level to the destination. So does
    a literal mention of the destination, erring on the side of safety. With
    neither, the destination is assumed unaffected.
    """
    lowered = text.lower()
    if any(keyword in lowered for keyword in WHOLE_COUNTRY_KEYWORDS):
        level, reason = max_level, "whole-country advisory"
    elif destination and destination in text:
        level, reason = max_level, "destination named in advisory"
    else:
        level, reason = 0, "destination not named in advisory"

    return RiskAssessment(
        specific_level=level,
        max_country_level=max_level,
        reason=reason,
        method="heuristic",
    )


def normalize_assessment(assessment: RiskAssessment, feed_level: int) -> RiskAssessment:
    """Enforce level ordering and keep only regions above the destination level.

    The country maximum never drops below the feed's own level or the
    destination level. Regions are deduplicated by name, first one wins.
    """
    specific = _clamp(assessment.specific_level, 0, 4)
    max_level = max(assessment.max_country_level, _clamp(feed_level, 0, 4), specific)

    regions: list[HighRiskRegion] = []
    seen: set[str] = set()
    for region in assessment.high_risk_regions:
        if region.level <= specific or region.region_name in seen:
            continue
        seen.add(region.region_name)
        regions.append(region)

    return assessment.model_copy(
        update={
            "specific_level": specific,
            "max_country_level": max_level,
            "high_risk_regions": regions,
        }
    )


class RiskDisambiguator:
    """Narrows a country-level danger level to a destination."""

    def __init__(self, classifier: RiskClassifier | None = None) -> None:
        self.classifier = classifier

    async def assess(
        self,
        text: str,
        destination: str,
        country_name: str,
        feed_level: int,
    ) -> RiskAssessment:
        """Classify with AI when possible, otherwise use the heuristic."""
        if self.classifier is not None:
            request = RiskRequest(
                text=text,
                destination=destination,
                country_name=country_name,
                max_level=_clamp(feed_level, 0, 4),
            )
            try:
                result = await self.classifier.classify_risk(request)
            except Exception as e:
                logger.warning("Risk classifier raised, using heuristic: %s", e)
                result = None
            if result is not None:
                assessment = normalize_assessment(result, feed_level)
                logger.info(
                    "AI risk for %s: %d (country max %d, %d high-risk regions)",
                    destination,
                    assessment.specific_level,
                    assessment.max_country_level,
                    len(assessment.high_risk_regions),
                )
                return assessment

        assessment = normalize_assessment(
            heuristic_assessment(text, destination, feed_level), feed_level
        )
        logger.info(
            "Heuristic risk for %s: %d (country max %d)",
            destination,
            assessment.specific_level,
            assessment.max_country_level,
        )
        return assessment
