"""Service layer exports."""

from .image_preparation import (
    ImageDecodeError,
    ImagePreparer,
    ImageRejectedError,
    ImageTooLargeError,
    ImageTooSmallError,
    PreparedImage,
)
from .oracle import OracleInvoker, OracleUnavailableError
from .photo_analysis import AnalysisRequestError, PhotoAnalysisService, PhotoDecodeError
from .prompt_builder import build_analysis_prompt
from .response_normalizer import fallback_result, normalize_response, rejected_result
from .safety_gate import SafetyGate

__all__ = [
    "AnalysisRequestError",
    "ImageDecodeError",
    "ImagePreparer",
    "ImageRejectedError",
    "ImageTooLargeError",
    "ImageTooSmallError",
    "OracleInvoker",
    "OracleUnavailableError",
    "PhotoAnalysisService",
    "PhotoDecodeError",
    "PreparedImage",
    "SafetyGate",
    "build_analysis_prompt",
    "fallback_result",
    "normalize_response",
    "rejected_result",
]
