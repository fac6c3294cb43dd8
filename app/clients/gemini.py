"""Client wrapper for interacting with Google Gemini vision models."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPICallError, NotFound

from app.core.config import GeminiSettings


_VISION_FALLBACKS: tuple[str, ...] = (
    "gemini-1.5-flash",
    "gemini-2.0-flash",
)

logger = logging.getLogger(__name__)


class GeminiModelError(RuntimeError):
    """Raised when Gemini cannot fulfill a request."""


class GeminiClient:
    """Send a prompt plus one inline image to Gemini and return the text reply."""

    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        if settings.api_key:
            # Configure the global client once per process.
            genai.configure(api_key=settings.api_key)

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    async def generate(
        self,
        prompt: str,
        image: bytes,
        *,
        mime_type: str = "image/jpeg",
        timeout: float | None = None,
    ) -> str:
        """Produce a free-form text response about the supplied image."""
        if not self.is_configured:
            raise GeminiModelError("GEMINI_API_KEY not configured")

        request_options = {"timeout": timeout} if timeout else None

        def _invoke() -> str:
            response = self._invoke_with_models(
                models=self._vision_model_candidates(),
                env_var="GEMINI_VISION_MODEL_NAME",
                error_prefix="Gemini vision generate_content failed",
                call=lambda model: model.generate_content(
                    [
                        prompt,
                        {
                            "mime_type": mime_type,
                            "data": image,
                        },
                    ],
                    request_options=request_options,
                ),
            )
            return _response_text(response)

        return await asyncio.to_thread(_invoke)

    def _invoke_with_models(
        self,
        *,
        models: Iterable[str],
        env_var: str,
        error_prefix: str,
        call: Callable[[genai.GenerativeModel], Any],
    ) -> Any:
        """Try the configured model followed by fallbacks when available."""

        model_sequence = list(models)
        last_not_found: NotFound | None = None
        for index, model_name in enumerate(model_sequence):
            generative_model = genai.GenerativeModel(model_name)
            try:
                return call(generative_model)
            except NotFound as exc:  # pragma: no cover - network call
                last_not_found = exc
                logger.warning(
                    "Gemini model '%s' not found (attempt %d/%d); trying fallback.",
                    model_name,
                    index + 1,
                    len(model_sequence),
                )
                continue
            except GoogleAPICallError as exc:  # pragma: no cover - network call
                raise GeminiModelError(f"{error_prefix}: {exc.message}") from exc

        if last_not_found is not None:
            primary = model_sequence[0] if model_sequence else "unknown"
            raise GeminiModelError(
                "Gemini model '"
                f"{primary}"
                "' is not available. Update "
                f"{env_var} to a supported value."
            ) from last_not_found

        raise GeminiModelError(f"{error_prefix}: Unknown error invoking Gemini.")

    def _vision_model_candidates(self) -> list[str]:
        return self._collect_candidates(
            self._settings.vision_model_name,
            _VISION_FALLBACKS,
        )

    @staticmethod
    def _collect_candidates(
        configured: str | None,
        fallbacks: tuple[str, ...],
    ) -> list[str]:
        """Return distinct model names prioritizing the configured value."""
        seen: set[str] = set()
        candidates: list[str] = []
        for name in (configured, *fallbacks):
            if not name:
                continue
            cleaned = name.strip()
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            candidates.append(cleaned)
        return candidates


def _response_text(response: Any) -> str:
    """Return the reply text, treating blocked or empty candidates as errors."""
    try:
        text = response.text
    except ValueError as exc:  # pragma: no cover - depends on live responses
        # ``.text`` raises when the candidate was blocked or has no parts.
        feedback = getattr(response, "prompt_feedback", None)
        raise GeminiModelError(f"Gemini returned no text: {feedback or exc}") from exc
    return text or ""


__all__ = ["GeminiClient", "GeminiModelError"]
