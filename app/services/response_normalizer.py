"""
Turn free-form oracle text into a fully populated ``AnalysisResult``.

Parsing is layered: a JSON object is located and validated into the permissive
``LooseAnalysis`` model, then every default and clamp is applied by the small
named functions below. When no usable JSON exists, a heuristic text scan
produces a best-effort result instead. Nothing in this module raises for bad
oracle output.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from app.schemas import (
    AnalysisOutcome,
    AnalysisResult,
    Categorization,
    CompetitiveAnalysis,
    Criterion,
    DatingInsights,
    LooseAnalysis,
    PsychologicalInsights,
    TechnicalFeedback,
)
from app.schemas.oracle import (
    LooseCategorization,
    LooseCompetitiveAnalysis,
    LooseDatingInsights,
    LoosePsychologicalInsights,
)
from app.services.prompt_builder import extension_fields

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 75.0
FALLBACK_SCORE = 70.0
DEFAULT_BEST_QUALITY = "Good photo for dating profile"
DEFAULT_SUGGESTIONS: tuple[str, ...] = ("Keep taking great photos!",)
# profile slots offered in the profile_order prompt
MAX_PROFILE_POSITION = 12

_SOCIAL_TAGS = frozenset({"social", "group", "friends", "party", "team"})
_ACTIVITY_TAGS = frozenset({"activity", "sport", "hobby", "travel", "outdoor", "adventure"})
_PERSONALITY_TAGS = frozenset({"personality", "authentic", "genuine", "expression", "creative"})

_SCORE_PATTERN = re.compile(
    r"(?:score|rating|quality)\"?'?\s*(?:[:=]|is|of)?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+|\n+")

_CRITERION_PLACEHOLDERS: dict[Criterion, str] = {
    Criterion.SOCIAL: "Photo shows social engagement and connectivity",
    Criterion.ACTIVITY: "Photo demonstrates active lifestyle and interests",
    Criterion.PERSONALITY: "Photo reveals authentic personality traits",
    Criterion.BALANCED: "Photo contributes to well-rounded profile presentation",
    Criterion.PROFILE_ORDER: "Photo suitable for strategic profile positioning",
    Criterion.CONVERSATION_STARTERS: "Photo provides conversation opportunities",
    Criterion.BROAD_APPEAL: "Photo has broad demographic appeal",
    Criterion.AUTHENTICITY: "Photo shows genuine, authentic expression",
    Criterion.BEST: "Photo demonstrates overall dating profile quality",
}

# keyword -> technical feedback field populated from the sentence mentioning it
_TECHNICAL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("lighting", ("lighting", "light ")),
    ("composition", ("composition", "framing")),
    ("styling", ("styling", "outfit", "grooming")),
)

_TAG_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("social", ("social", "group")),
    ("activity", ("activity", "sport")),
    ("personality", ("personality", "character")),
    ("professional", ("professional",)),
    ("casual", ("casual",)),
    ("outdoor", ("outdoor",)),
)


# -- primitive normalization rules -------------------------------------------


def clamp_score(value: Optional[float], default: float) -> float:
    """Clamp to [0, 100]; ``None`` means absent and takes the default."""
    if value is None:
        value = default
    return float(min(max(value, 0.0), 100.0))


def coalesce(*values: Optional[float]) -> Optional[float]:
    """First value that is not ``None``; zero counts as present."""
    for value in values:
        if value is not None:
            return value
    return None


def coalesce_list(value: Optional[List[str]]) -> List[str]:
    return list(value) if value else []


def first_non_empty(*candidates: Optional[List[str]]) -> Optional[List[str]]:
    for candidate in candidates:
        if candidate:
            return list(candidate)
    return None


# -- JSON extraction ---------------------------------------------------------


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Locate and parse the JSON object embedded in ``text``.

    The greedy first-``{`` to last-``}`` span is tried first since it covers
    the common case of a fenced or prefixed object; each balanced-brace
    candidate is tried after that.
    """
    if not text:
        return None
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        parsed = _loads_object(text[start : end + 1])
        if parsed is not None:
            return parsed
    for candidate in _balanced_candidates(text):
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed
    return None


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def _balanced_candidates(text: str) -> Iterable[str]:
    for start in (match.start() for match in re.finditer(r"\{", text)):
        depth = 0
        for index in range(start, len(text)):
            char = text[index]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    yield text[start : index + 1]
                    break


# -- structured path ---------------------------------------------------------


def normalize_response(
    response_text: str,
    criterion: Criterion | str | None,
    file_name: str,
) -> AnalysisResult:
    """Build a result from raw oracle text; never raises."""
    resolved = Criterion.resolve(criterion)
    payload = extract_json_object(response_text or "")
    if payload is not None:
        try:
            loose = LooseAnalysis.model_validate(payload)
        except ValidationError as exc:  # pragma: no cover - validators are permissive
            logger.warning("Oracle JSON for %s failed validation: %s", file_name, exc)
        else:
            logger.info("Parsed oracle JSON for %s: %s", file_name, sorted(payload))
            return result_from_loose(loose, resolved, file_name)

    logger.info(
        "JSON parsing failed for %s (%s), using heuristic scan", file_name, resolved.value
    )
    return heuristic_result(response_text or "", resolved, file_name)


def result_from_loose(
    loose: LooseAnalysis, criterion: Criterion, file_name: str
) -> AnalysisResult:
    score = clamp_score(coalesce(loose.overallScore, loose.score), DEFAULT_SCORE)
    strengths = coalesce_list(loose.strengths)
    improvements = coalesce_list(loose.improvements)
    tags = coalesce_list(loose.tags)

    result = AnalysisResult(
        file_name=file_name,
        outcome=AnalysisOutcome.ANALYZED,
        score=score,
        visual_quality=clamp_score(loose.visualQuality, score),
        attractiveness_score=clamp_score(loose.attractivenessScore, score),
        dating_appeal_score=clamp_score(loose.datingAppealScore, score),
        swipe_worthiness=clamp_score(loose.swipeWorthiness, score),
        tags=tags,
        best_quality=strengths[0] if strengths else (loose.bestQuality or DEFAULT_BEST_QUALITY),
        suggestions=first_non_empty(improvements, loose.suggestions) or list(DEFAULT_SUGGESTIONS),
        strengths=strengths,
        improvements=improvements,
        next_photo_suggestions=coalesce_list(loose.nextPhotoSuggestions),
        technical_feedback=TechnicalFeedback(
            **(loose.technicalFeedback.model_dump() if loose.technicalFeedback else {})
        ),
        dating_insights=normalize_dating_insights(loose.datingInsights),
        categorization=(
            normalize_categorization(loose.categorization)
            if loose.categorization
            else infer_categorization(tags)
        ),
        psychological_insights=normalize_psychological_insights(loose.psychologicalInsights),
        competitive_analysis=normalize_competitive_analysis(loose.competitiveAnalysis),
    )
    return apply_extension_fields(result, loose, criterion)


def normalize_dating_insights(loose: Optional[LooseDatingInsights]) -> DatingInsights:
    if loose is None:
        return DatingInsights()
    return DatingInsights(
        personality_projected=coalesce_list(loose.personalityProjected),
        demographic_appeal=loose.demographicAppeal,
        profile_role=loose.profileRole,
    )


def normalize_categorization(loose: LooseCategorization) -> Categorization:
    return Categorization(
        social_score=clamp_score(loose.socialScore, 0),
        activity_score=clamp_score(loose.activityScore, 0),
        personality_score=clamp_score(loose.personalityScore, 0),
        primary_category=(loose.primaryCategory or "general").lower(),
        category_confidence=clamp_score(loose.categoryConfidence, 50),
    )


def infer_categorization(tags: Iterable[str]) -> Categorization:
    """Derive category scores from tags when the oracle did not supply them."""
    lowered = [tag.lower() for tag in tags]
    social = max(sum(tag in _SOCIAL_TAGS for tag in lowered) * 25, 30)
    activity = max(sum(tag in _ACTIVITY_TAGS for tag in lowered) * 25, 30)
    personality = max(sum(tag in _PERSONALITY_TAGS for tag in lowered) * 25, 30)
    top = max(social, activity, personality)
    if top == social:
        primary = "social"
    elif top == activity:
        primary = "activity"
    else:
        primary = "personality"
    return Categorization(
        social_score=min(social, 100),
        activity_score=min(activity, 100),
        personality_score=min(personality, 100),
        primary_category=primary,
        category_confidence=min(top, 100),
    )


def normalize_psychological_insights(
    loose: Optional[LoosePsychologicalInsights],
) -> Optional[PsychologicalInsights]:
    if loose is None:
        return None
    defaults = PsychologicalInsights()
    return PsychologicalInsights(
        confidence=coalesce_list(loose.confidence),
        authenticity=loose.authenticity or defaults.authenticity,
        emotional_intelligence=loose.emotionalIntelligence or defaults.emotional_intelligence,
        market_positioning=loose.marketPositioning or defaults.market_positioning,
        psychological_impact=loose.psychologicalImpact or defaults.psychological_impact,
        trustworthiness=loose.trustworthiness or defaults.trustworthiness,
        approachability=loose.approachability or defaults.approachability,
    )


def normalize_competitive_analysis(
    loose: Optional[LooseCompetitiveAnalysis],
) -> Optional[CompetitiveAnalysis]:
    if loose is None:
        return None
    return CompetitiveAnalysis(
        unique_elements=coalesce_list(loose.uniqueElements),
        market_advantages=coalesce_list(loose.marketAdvantages),
        improvement_potential=coalesce_list(loose.improvementPotential),
    )


def apply_extension_fields(
    result: AnalysisResult, loose: LooseAnalysis, criterion: Criterion
) -> AnalysisResult:
    """Copy only the criterion-specific fields the requesting criterion asked for."""
    updates: Dict[str, Any] = {}
    for field_name in extension_fields(criterion):
        value = getattr(loose, field_name)
        if value is None:
            continue
        if field_name == "position":
            value = int(round(min(value, MAX_PROFILE_POSITION)))
            if value < 1:
                continue
        updates[_to_snake(field_name)] = value
    return result.model_copy(update=updates) if updates else result


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# -- heuristic path ----------------------------------------------------------


def extract_score(text: str) -> float:
    """Average every number following score/rating/quality, default 75.

    Each value is clamped before averaging so one runaway number cannot
    swamp the others.
    """
    values = [
        clamp_score(float(match), DEFAULT_SCORE) for match in _SCORE_PATTERN.findall(text)
    ]
    if not values:
        return DEFAULT_SCORE
    return sum(values) / len(values)


def extract_tags(text: str) -> List[str]:
    lowered = text.lower()
    tags = [
        tag for tag, keywords in _TAG_KEYWORDS if any(word in lowered for word in keywords)
    ]
    return tags or ["analyzed"]


def extract_technical_feedback(text: str) -> TechnicalFeedback:
    sentences = [part.strip() for part in _SENTENCE_SPLIT.split(text) if part.strip()]
    found: Dict[str, str] = {}
    for field_name, keywords in _TECHNICAL_KEYWORDS:
        for sentence in sentences:
            lowered = sentence.lower()
            if any(keyword in lowered for keyword in keywords):
                found[field_name] = sentence[:300]
                break
    return TechnicalFeedback(**found)


def heuristic_result(
    response_text: str, criterion: Criterion, file_name: str
) -> AnalysisResult:
    """Best-effort result for oracle text that carried no usable JSON."""
    score = extract_score(response_text)
    lowered = response_text.lower()

    best_quality = _CRITERION_PLACEHOLDERS[criterion]
    if "excellent" in lowered:
        best_quality = "Excellent photo quality with strong appeal"
    elif "confident" in lowered:
        best_quality = "Shows confidence which is very attractive"
    elif "natural" in lowered:
        best_quality = "Natural, relaxed presence comes across well"

    suggestions = ["Consider technical improvements for enhanced appeal"]
    tags = extract_tags(response_text)

    return AnalysisResult(
        file_name=file_name,
        outcome=AnalysisOutcome.HEURISTIC,
        score=score,
        visual_quality=max(score - 5, 0),
        attractiveness_score=score,
        dating_appeal_score=max(score - 3, 0),
        swipe_worthiness=max(score - 2, 0),
        tags=tags,
        best_quality=best_quality,
        suggestions=suggestions,
        strengths=[best_quality],
        improvements=list(suggestions),
        next_photo_suggestions=["Add complementary photos for variety"],
        technical_feedback=extract_technical_feedback(response_text),
        dating_insights=DatingInsights(
            demographic_appeal="Analysis in progress",
            profile_role="Profile enhancement",
        ),
        categorization=infer_categorization(tags),
    )


# -- fixed outcome shapes ----------------------------------------------------


def rejected_result(file_name: str, reason: str) -> AnalysisResult:
    """Zero-scored result for images blocked before reaching the oracle."""
    return AnalysisResult(
        file_name=file_name,
        outcome=AnalysisOutcome.REJECTED,
        score=0,
        visual_quality=0,
        attractiveness_score=0,
        dating_appeal_score=0,
        swipe_worthiness=0,
        suggestions=[reason],
        improvements=[reason],
        categorization=Categorization(
            social_score=0,
            activity_score=0,
            personality_score=0,
            primary_category="rejected",
            category_confidence=100,
        ),
        dating_insights=DatingInsights(
            demographic_appeal="Not applicable", profile_role="Not suitable"
        ),
    )


def fallback_result(file_name: str, error_message: Optional[str] = None) -> AnalysisResult:
    """Placeholder result used when the oracle or pipeline failed."""
    return AnalysisResult(
        file_name=file_name,
        outcome=AnalysisOutcome.FALLBACK,
        score=FALLBACK_SCORE,
        visual_quality=65,
        attractiveness_score=70,
        dating_appeal_score=68,
        swipe_worthiness=67,
        tags=["uploaded"],
        best_quality="Photo uploaded successfully",
        suggestions=["Analysis temporarily unavailable - please try again"],
        strengths=["Photo processed successfully"],
        improvements=[error_message or "Please try uploading again"],
        next_photo_suggestions=["Try different photos for comparison"],
        categorization=Categorization(
            social_score=50,
            activity_score=50,
            personality_score=50,
            primary_category="general",
            category_confidence=50,
        ),
        dating_insights=DatingInsights(
            demographic_appeal="Processing", profile_role="Analysis pending"
        ),
    )


__all__ = [
    "DEFAULT_SCORE",
    "FALLBACK_SCORE",
    "clamp_score",
    "extract_json_object",
    "extract_score",
    "extract_tags",
    "fallback_result",
    "heuristic_result",
    "infer_categorization",
    "normalize_response",
    "rejected_result",
    "result_from_loose",
]
