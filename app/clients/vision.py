"""Google Cloud Vision SafeSearch client wrapper."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import vision

SAFE_SEARCH_CATEGORIES: tuple[str, ...] = (
    "adult",
    "spoof",
    "medical",
    "violence",
    "racy",
)


class SafetyClassifierError(RuntimeError):
    """Raised when the SafeSearch classifier could not produce a verdict."""


class SafeSearchClient:
    """Classify image bytes into SafeSearch likelihood names per category."""

    def __init__(self, annotator: Optional[Any] = None) -> None:
        self._annotator = annotator

    def _client(self) -> Any:
        # Credentials are resolved lazily so the app can boot without them.
        if self._annotator is None:
            self._annotator = vision.ImageAnnotatorClient()
        return self._annotator

    async def classify(self, image: bytes) -> Dict[str, str]:
        """Return e.g. ``{"adult": "VERY_UNLIKELY", "racy": "POSSIBLE", ...}``."""

        def _invoke() -> Dict[str, str]:
            try:
                response = self._client().safe_search_detection(
                    image=vision.Image(content=image)
                )
            except GoogleAPICallError as exc:  # pragma: no cover - network call
                raise SafetyClassifierError(
                    f"SafeSearch request failed: {exc.message}"
                ) from exc
            if response.error.message:
                raise SafetyClassifierError(
                    f"SafeSearch returned an error: {response.error.message}"
                )
            annotation = response.safe_search_annotation
            return {
                category: vision.Likelihood(getattr(annotation, category)).name
                for category in SAFE_SEARCH_CATEGORIES
            }

        return await asyncio.to_thread(_invoke)


__all__ = ["SAFE_SEARCH_CATEGORIES", "SafeSearchClient", "SafetyClassifierError"]
