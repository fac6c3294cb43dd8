"""Expose constructed client wrappers."""

from .gemini import GeminiClient, GeminiModelError
from .photo_fetcher import PhotoFetcher, PhotoFetchError
from .vision import SafeSearchClient, SafetyClassifierError

__all__ = [
    "GeminiClient",
    "GeminiModelError",
    "PhotoFetchError",
    "PhotoFetcher",
    "SafeSearchClient",
    "SafetyClassifierError",
]
