"""Content-policy screening in front of the oracle."""

from __future__ import annotations

import logging
from typing import Dict, Protocol

from app.core.config import SafetySettings

logger = logging.getLogger(__name__)

FLAGGED_LIKELIHOODS = frozenset({"LIKELY", "VERY_LIKELY"})


class SafetyClassifier(Protocol):
    async def classify(self, image: bytes) -> Dict[str, str]:
        ...


class SafetyGate:
    """Decide whether an image may be sent for analysis.

    The check fails open: if the classifier itself errors, the image is
    treated as safe and the failure is logged.
    """

    def __init__(self, classifier: SafetyClassifier, settings: SafetySettings) -> None:
        self._classifier = classifier
        self._settings = settings

    async def is_safe(self, image: bytes) -> bool:
        if not self._settings.enabled:
            return True
        try:
            verdict = await self._classifier.classify(image)
        except Exception as exc:
            logger.warning("SafeSearch check failed, proceeding with analysis: %s", exc)
            return True

        flagged = flagged_categories(verdict, self._settings.monitored_categories)
        if flagged:
            logger.warning("SafeSearch blocked image: %s", verdict)
            return False
        return True


def flagged_categories(
    verdict: Dict[str, str], monitored: tuple[str, ...]
) -> list[str]:
    """Return the monitored categories rated likely or very likely."""
    return [
        category
        for category in monitored
        if str(verdict.get(category, "")).upper() in FLAGGED_LIKELIHOODS
    ]


__all__ = ["FLAGGED_LIKELIHOODS", "SafetyClassifier", "SafetyGate", "flagged_categories"]
