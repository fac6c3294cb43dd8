"""
Permissive models for the JSON object emitted by the oracle.

Every field is optional and values of the wrong shape are dropped rather than
rejected, so a partially valid payload still yields whatever it got right.
Defaults and clamps are applied later by the response normalizer.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _loose_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _loose_string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _loose_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


class _LooseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LooseTechnicalFeedback(_LooseModel):
    lighting: Optional[str] = None
    composition: Optional[str] = None
    styling: Optional[str] = None

    @field_validator("lighting", "composition", "styling", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _loose_text(value)


class LooseDatingInsights(_LooseModel):
    personalityProjected: Optional[List[str]] = None
    demographicAppeal: Optional[str] = None
    profileRole: Optional[str] = None

    @field_validator("personalityProjected", mode="before")
    @classmethod
    def _list(cls, value: Any) -> Optional[List[str]]:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return _loose_string_list(value)

    @field_validator("demographicAppeal", "profileRole", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _loose_text(value)


class LooseCategorization(_LooseModel):
    socialScore: Optional[float] = None
    activityScore: Optional[float] = None
    personalityScore: Optional[float] = None
    primaryCategory: Optional[str] = None
    categoryConfidence: Optional[float] = None

    @field_validator(
        "socialScore",
        "activityScore",
        "personalityScore",
        "categoryConfidence",
        mode="before",
    )
    @classmethod
    def _number(cls, value: Any) -> Optional[float]:
        return _loose_number(value)

    @field_validator("primaryCategory", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _loose_text(value)


class LoosePsychologicalInsights(_LooseModel):
    confidence: Optional[List[str]] = None
    authenticity: Optional[str] = None
    emotionalIntelligence: Optional[str] = None
    marketPositioning: Optional[str] = None
    psychologicalImpact: Optional[str] = None
    trustworthiness: Optional[str] = None
    approachability: Optional[str] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _list(cls, value: Any) -> Optional[List[str]]:
        return _loose_string_list(value)

    @field_validator(
        "authenticity",
        "emotionalIntelligence",
        "marketPositioning",
        "psychologicalImpact",
        "trustworthiness",
        "approachability",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _loose_text(value)


class LooseCompetitiveAnalysis(_LooseModel):
    uniqueElements: Optional[List[str]] = None
    marketAdvantages: Optional[List[str]] = None
    improvementPotential: Optional[List[str]] = None

    @field_validator(
        "uniqueElements", "marketAdvantages", "improvementPotential", mode="before"
    )
    @classmethod
    def _list(cls, value: Any) -> Optional[List[str]]:
        return _loose_string_list(value)


class LooseAnalysis(_LooseModel):
    """Oracle response as parsed, with every field optional."""

    overallScore: Optional[float] = None
    score: Optional[float] = None
    visualQuality: Optional[float] = None
    attractivenessScore: Optional[float] = None
    datingAppealScore: Optional[float] = None
    swipeWorthiness: Optional[float] = None

    tags: Optional[List[str]] = None
    bestQuality: Optional[str] = None
    strengths: Optional[List[str]] = None
    improvements: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None
    nextPhotoSuggestions: Optional[List[str]] = None

    technicalFeedback: Optional[LooseTechnicalFeedback] = None
    datingInsights: Optional[LooseDatingInsights] = None
    categorization: Optional[LooseCategorization] = None
    psychologicalInsights: Optional[LoosePsychologicalInsights] = None
    competitiveAnalysis: Optional[LooseCompetitiveAnalysis] = None

    position: Optional[float] = None
    positionReason: Optional[str] = None
    conversationElements: Optional[List[str]] = None
    messageHooks: Optional[List[str]] = None
    appealBreadth: Optional[str] = None
    authenticityLevel: Optional[str] = None

    @field_validator(
        "overallScore",
        "score",
        "visualQuality",
        "attractivenessScore",
        "datingAppealScore",
        "swipeWorthiness",
        "position",
        mode="before",
    )
    @classmethod
    def _number(cls, value: Any) -> Optional[float]:
        return _loose_number(value)

    @field_validator(
        "tags",
        "strengths",
        "improvements",
        "suggestions",
        "nextPhotoSuggestions",
        "conversationElements",
        "messageHooks",
        mode="before",
    )
    @classmethod
    def _list(cls, value: Any) -> Optional[List[str]]:
        return _loose_string_list(value)

    @field_validator(
        "bestQuality",
        "positionReason",
        "appealBreadth",
        "authenticityLevel",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _loose_text(value)

    @field_validator(
        "technicalFeedback",
        "datingInsights",
        "categorization",
        "psychologicalInsights",
        "competitiveAnalysis",
        mode="before",
    )
    @classmethod
    def _object(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None


__all__ = [
    "LooseAnalysis",
    "LooseCategorization",
    "LooseCompetitiveAnalysis",
    "LooseDatingInsights",
    "LoosePsychologicalInsights",
    "LooseTechnicalFeedback",
]
