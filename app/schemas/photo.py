"""
Pydantic models for photo analysis requests and results.

Attributes are snake_case in Python and camelCase on the wire so responses
match the mobile client's decoding contract.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Criterion(str, Enum):
    """Evaluation lens that selects the prompt and schema variant."""

    BEST = "best"
    BALANCED = "balanced"
    PROFILE_ORDER = "profile_order"
    CONVERSATION_STARTERS = "conversation_starters"
    BROAD_APPEAL = "broad_appeal"
    AUTHENTICITY = "authenticity"
    SOCIAL = "social"
    ACTIVITY = "activity"
    PERSONALITY = "personality"

    @classmethod
    def resolve(cls, value: "Criterion | str | None") -> "Criterion":
        """Map any requested value onto a supported criterion, defaulting to best."""
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            return cls.BEST


class AnalysisOutcome(str, Enum):
    """How a result was produced."""

    ANALYZED = "analyzed"
    HEURISTIC = "heuristic"
    REJECTED = "rejected"
    FALLBACK = "fallback"


class CamelModel(BaseModel):
    """Base model serializing field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TechnicalFeedback(CamelModel):
    lighting: Optional[str] = None
    composition: Optional[str] = None
    styling: Optional[str] = None


class DatingInsights(CamelModel):
    personality_projected: List[str] = Field(default_factory=list)
    demographic_appeal: Optional[str] = None
    profile_role: Optional[str] = None


class Categorization(CamelModel):
    """Social/activity/personality breakdown used for balanced selection."""

    social_score: float = 0
    activity_score: float = 0
    personality_score: float = 0
    primary_category: str = "general"
    category_confidence: float = 50


class PsychologicalInsights(CamelModel):
    confidence: List[str] = Field(default_factory=list)
    authenticity: str = "Assessment pending"
    emotional_intelligence: str = "Analysis available"
    market_positioning: str = "Competitive analysis"
    psychological_impact: str = "Impact assessment"
    trustworthiness: str = "Trust factor analysis"
    approachability: str = "Approachability assessment"


class CompetitiveAnalysis(CamelModel):
    unique_elements: List[str] = Field(default_factory=list)
    market_advantages: List[str] = Field(default_factory=list)
    improvement_potential: List[str] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    """Fully populated assessment of a single photo."""

    file_name: str
    outcome: AnalysisOutcome = AnalysisOutcome.ANALYZED
    score: float = Field(..., ge=0, le=100)
    visual_quality: float = Field(..., ge=0, le=100)
    attractiveness_score: float = Field(..., ge=0, le=100)
    dating_appeal_score: float = Field(..., ge=0, le=100)
    swipe_worthiness: float = Field(..., ge=0, le=100)

    tags: List[str] = Field(default_factory=list)
    best_quality: str = ""
    suggestions: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    next_photo_suggestions: List[str] = Field(default_factory=list)

    technical_feedback: TechnicalFeedback = Field(default_factory=TechnicalFeedback)
    dating_insights: DatingInsights = Field(default_factory=DatingInsights)
    categorization: Categorization = Field(default_factory=Categorization)
    psychological_insights: Optional[PsychologicalInsights] = None
    competitive_analysis: Optional[CompetitiveAnalysis] = None

    # Criterion-specific extensions; null unless the criterion asks for them.
    position: Optional[int] = None
    position_reason: Optional[str] = None
    conversation_elements: Optional[List[str]] = None
    message_hooks: Optional[List[str]] = None
    appeal_breadth: Optional[str] = None
    authenticity_level: Optional[str] = None


class PhotoAnalysisRequest(BaseModel):
    """Payload submitted to rank a batch of photos."""

    photos: List[str] = Field(
        default_factory=list,
        description="Base64 image payloads (optionally data URIs) or http(s) references.",
    )
    criterion: str = Field(
        "best",
        validation_alias=AliasChoices("criterion", "criteria"),
        description="Evaluation lens; unsupported values fall back to 'best'.",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("criterion", mode="before")
    @classmethod
    def _default_blank_criterion(cls, value: Any) -> Any:
        if value is None:
            return "best"
        return value


class BatchMetadata(CamelModel):
    total_photos: int
    batches_processed: int
    average_score: int
    criteria_used: str
    processing_version: str


class PhotoAnalysisResponse(CamelModel):
    """Envelope returned for a successful analysis request."""

    success: bool = True
    results: List[AnalysisResult]
    metadata: BatchMetadata


class AnalysisErrorDetail(BaseModel):
    kind: str
    message: str


class AnalysisErrorResponse(BaseModel):
    success: bool = False
    error: AnalysisErrorDetail


class ServiceConfig(CamelModel):
    """Static capability descriptor exposed to clients."""

    max_photos: int
    max_batch_size: int
    supported_criteria: List[str]
    version: str
    features: Dict[str, bool]
    analysis_depth: str = "hybrid_practical_plus_insights"


__all__ = [
    "AnalysisErrorDetail",
    "AnalysisErrorResponse",
    "AnalysisOutcome",
    "AnalysisResult",
    "BatchMetadata",
    "Categorization",
    "CompetitiveAnalysis",
    "Criterion",
    "DatingInsights",
    "PhotoAnalysisRequest",
    "PhotoAnalysisResponse",
    "PsychologicalInsights",
    "ServiceConfig",
    "TechnicalFeedback",
]
