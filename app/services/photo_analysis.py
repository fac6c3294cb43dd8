"""
Batch orchestration for photo analysis requests.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import math
import re
from typing import List, Sequence

from app.clients.photo_fetcher import PhotoFetcher
from app.core.config import AppSettings
from app.schemas import (
    AnalysisResult,
    BatchMetadata,
    Criterion,
    PhotoAnalysisRequest,
    PhotoAnalysisResponse,
    ServiceConfig,
)
from app.services.image_preparation import ImagePreparer, ImageRejectedError
from app.services.oracle import OracleInvoker
from app.services.prompt_builder import build_analysis_prompt
from app.services.response_normalizer import (
    fallback_result,
    normalize_response,
    rejected_result,
)
from app.services.safety_gate import SafetyGate
from app.utils.retry import SleepFunc

logger = logging.getLogger(__name__)

CONTENT_POLICY_MESSAGE = "Image violates content policy"

_DATA_URI_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

_FEATURES = {
    "hybridAnalysis": True,
    "practicalAdvice": True,
    "psychologicalInsights": True,
    "competitiveAnalysis": True,
    "categorizationScoring": True,
    "actionableFeedback": True,
    "personalityAssessment": True,
    "marketPositioning": True,
    "enhancedImageProcessing": True,
    "base64Processing": True,
    "urlProcessing": True,
}


class AnalysisRequestError(Exception):
    """Request-level failure; no partial results are returned."""

    INVALID_ARGUMENT = "invalid-argument"
    INTERNAL = "internal"

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class PhotoDecodeError(ValueError):
    """Raised when an inline photo payload is not valid base64."""


def decode_photo_payload(payload: str) -> bytes:
    """Decode a base64 photo, accepting an optional ``data:`` URI prefix."""
    body = _WHITESPACE.sub("", _DATA_URI_PREFIX.sub("", payload.strip(), count=1))
    if not body:
        raise PhotoDecodeError("Photo payload is empty")
    try:
        return base64.b64decode(body, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise PhotoDecodeError("Photo payload is not valid base64") from exc


class PhotoAnalysisService:
    """Run the per-photo pipeline over a batch and assemble the ranked response.

    Photos are processed in sequential groups of ``concurrency_limit``. Within
    a group each photo starts after a small stagger and the group is awaited as
    a whole before pausing and moving to the next one. Every photo task turns
    its own failure into a rejected or fallback result, so one bad photo never
    fails the batch.
    """

    def __init__(
        self,
        *,
        oracle: OracleInvoker,
        safety_gate: SafetyGate,
        preparer: ImagePreparer,
        fetcher: PhotoFetcher,
        settings: AppSettings,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._oracle = oracle
        self._safety_gate = safety_gate
        self._preparer = preparer
        self._fetcher = fetcher
        self._settings = settings
        self._sleep = sleep

    async def analyze(self, request: PhotoAnalysisRequest) -> PhotoAnalysisResponse:
        batch = self._settings.batch
        photos = list(request.photos)

        if not photos:
            raise AnalysisRequestError(
                AnalysisRequestError.INVALID_ARGUMENT, "No photos provided for analysis."
            )
        if len(photos) > batch.max_batch_size:
            raise AnalysisRequestError(
                AnalysisRequestError.INVALID_ARGUMENT,
                f"Maximum {batch.max_batch_size} photos allowed per analysis.",
            )
        if not self._oracle.is_configured:
            raise AnalysisRequestError(
                AnalysisRequestError.INTERNAL, "Gemini API key is not configured."
            )

        criterion = Criterion.resolve(request.criterion)
        logger.info(
            "Starting analysis of %d photos with criterion %s", len(photos), criterion.value
        )

        try:
            results, group_count = await self._run_groups(photos, criterion)
        except Exception as exc:
            logger.exception("Photo analysis batch failed")
            raise AnalysisRequestError(
                AnalysisRequestError.INTERNAL, f"Analysis failed: {exc}"
            ) from exc

        ranked = sorted(results, key=lambda result: -result.score)
        average = math.floor(sum(r.score for r in results) / len(results) + 0.5)

        logger.info(
            "Analysis complete: %d results, average score %d", len(results), average
        )
        return PhotoAnalysisResponse(
            results=ranked[: batch.result_cap],
            metadata=BatchMetadata(
                total_photos=len(photos),
                batches_processed=group_count,
                average_score=average,
                criteria_used=request.criterion,
                processing_version=self._settings.version,
            ),
        )

    def describe(self) -> ServiceConfig:
        """Capability descriptor for clients."""
        return ServiceConfig(
            max_photos=self._settings.batch.max_batch_size,
            max_batch_size=self._settings.batch.max_batch_size,
            supported_criteria=[criterion.value for criterion in Criterion],
            version=self._settings.version,
            features={**_FEATURES, "contentSafety": self._settings.safety.enabled},
        )

    async def _run_groups(
        self, photos: Sequence[str], criterion: Criterion
    ) -> tuple[List[AnalysisResult], int]:
        batch = self._settings.batch
        prompt = build_analysis_prompt(criterion)
        size = batch.concurrency_limit
        groups = [photos[start : start + size] for start in range(0, len(photos), size)]

        results: List[AnalysisResult] = []
        for group_index, group in enumerate(groups):
            offset = group_index * size
            logger.info(
                "Processing group %d/%d (%d photos)", group_index + 1, len(groups), len(group)
            )
            group_results = await asyncio.gather(
                *(
                    self._analyze_photo(
                        photo,
                        index=offset + position,
                        prompt=prompt,
                        criterion=criterion,
                        delay=position * batch.stagger_seconds,
                    )
                    for position, photo in enumerate(group)
                )
            )
            results.extend(group_results)

            if group_index < len(groups) - 1 and batch.group_pause_seconds > 0:
                await self._sleep(batch.group_pause_seconds)

        return results, len(groups)

    async def _analyze_photo(
        self,
        photo: str,
        *,
        index: int,
        prompt: str,
        criterion: Criterion,
        delay: float,
    ) -> AnalysisResult:
        file_name = f"photo_{index}"
        if delay > 0:
            await self._sleep(delay)

        try:
            raw = await self._resolve_payload(photo)
            prepared = await self._preparer.prepare(raw)
            if not await self._safety_gate.is_safe(prepared.data):
                logger.warning("Rejected %s: content policy", file_name)
                return rejected_result(file_name, CONTENT_POLICY_MESSAGE)
            text = await self._oracle.invoke(prompt, prepared.data, label=file_name)
            return normalize_response(text, criterion, file_name)
        except ImageRejectedError as exc:
            logger.info("Rejected %s: %s", file_name, exc)
            return rejected_result(file_name, str(exc))
        except Exception as exc:
            logger.exception("Analysis failed for %s", file_name)
            return fallback_result(file_name, str(exc) or type(exc).__name__)

    async def _resolve_payload(self, photo: str) -> bytes:
        reference = photo.strip()
        if reference.lower().startswith(("http://", "https://")):
            return await self._fetcher.fetch(reference)
        return decode_photo_payload(reference)


__all__ = [
    "AnalysisRequestError",
    "CONTENT_POLICY_MESSAGE",
    "PhotoAnalysisService",
    "PhotoDecodeError",
    "decode_photo_payload",
]
