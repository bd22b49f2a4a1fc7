"""Destination-level risk disambiguation."""

from travel_info.disambiguation.risk import (
    CLASSIFY_RISK_FUNCTION,
    WHOLE_COUNTRY_KEYWORDS,
    OpenAIRiskClassifier,
    RiskAssessment,
    RiskClassifier,
    RiskDisambiguator,
    RiskRequest,
    heuristic_assessment,
    needs_disambiguation,
    normalize_assessment,
)

__all__ = [
    "CLASSIFY_RISK_FUNCTION",
    "WHOLE_COUNTRY_KEYWORDS",
    "OpenAIRiskClassifier",
    "RiskAssessment",
    "RiskClassifier",
    "RiskDisambiguator",
    "RiskRequest",
    "heuristic_assessment",
    "needs_disambiguation",
    "normalize_assessment",
]
