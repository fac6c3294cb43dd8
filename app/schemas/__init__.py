"""Public schema exports."""

from .oracle import LooseAnalysis
from .photo import (
    AnalysisErrorDetail,
    AnalysisErrorResponse,
    AnalysisOutcome,
    AnalysisResult,
    BatchMetadata,
    Categorization,
    CompetitiveAnalysis,
    Criterion,
    DatingInsights,
    PhotoAnalysisRequest,
    PhotoAnalysisResponse,
    PsychologicalInsights,
    ServiceConfig,
    TechnicalFeedback,
)

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
    "LooseAnalysis",
    "PhotoAnalysisRequest",
    "PhotoAnalysisResponse",
    "PsychologicalInsights",
    "ServiceConfig",
    "TechnicalFeedback",
]
