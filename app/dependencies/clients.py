"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from app.clients import GeminiClient, PhotoFetcher, SafeSearchClient
from app.core.config import get_settings
from app.services import (
    ImagePreparer,
    OracleInvoker,
    PhotoAnalysisService,
    SafetyGate,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Provide Gemini client instance."""
    settings = _settings()
    return GeminiClient(settings.gemini)


@lru_cache()
def get_safe_search_client() -> SafeSearchClient:
    """Provide Cloud Vision SafeSearch client; credentials resolve on first use."""
    return SafeSearchClient()


@lru_cache()
def get_photo_fetcher() -> PhotoFetcher:
    """Provide downloader for photos supplied by URL."""
    settings = _settings()
    return PhotoFetcher(settings.fetch)


@lru_cache()
def get_oracle_invoker() -> OracleInvoker:
    """Wrap the Gemini client with timeout and retry policy."""
    settings = _settings()
    return OracleInvoker(get_gemini_client(), settings.oracle)


@lru_cache()
def get_safety_gate() -> SafetyGate:
    settings = _settings()
    return SafetyGate(get_safe_search_client(), settings.safety)


@lru_cache()
def get_image_preparer() -> ImagePreparer:
    settings = _settings()
    return ImagePreparer(settings.image)


def get_photo_analysis_service() -> PhotoAnalysisService:
    """Build the batch analysis service from the shared clients."""
    return PhotoAnalysisService(
        oracle=get_oracle_invoker(),
        safety_gate=get_safety_gate(),
        preparer=get_image_preparer(),
        fetcher=get_photo_fetcher(),
        settings=_settings(),
    )


__all__ = [
    "get_gemini_client",
    "get_image_preparer",
    "get_oracle_invoker",
    "get_photo_analysis_service",
    "get_photo_fetcher",
    "get_safe_search_client",
    "get_safety_gate",
]
