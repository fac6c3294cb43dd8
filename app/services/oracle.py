"""Bounded, retried calls to the multimodal oracle."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx

from app.clients.gemini import GeminiModelError
from app.core.config import OracleSettings
from app.utils.retry import RetryConfig, SleepFunc, retry_async

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    asyncio.TimeoutError,
    GeminiModelError,
    httpx.HTTPError,
    ConnectionError,
)


class OracleClient(Protocol):
    @property
    def is_configured(self) -> bool:
        ...

    async def generate(
        self,
        prompt: str,
        image: bytes,
        *,
        mime_type: str = "image/jpeg",
        timeout: float | None = None,
    ) -> str:
        ...


class OracleUnavailableError(RuntimeError):
    """Raised once every attempt to reach the oracle has failed."""


class OracleInvoker:
    """Apply the per-call timeout and retry policy around an oracle client."""

    def __init__(
        self,
        client: OracleClient,
        settings: OracleSettings,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._client = client
        self._settings = settings
        self._sleep = sleep
        self._retry_config = RetryConfig(
            attempts=settings.max_attempts,
            backoff_seconds=settings.backoff_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return self._client.is_configured

    async def invoke(self, prompt: str, image: bytes, *, label: str = "photo") -> str:
        timeout = self._settings.timeout_seconds

        async def _attempt() -> str:
            try:
                return await asyncio.wait_for(
                    self._client.generate(prompt, image, timeout=timeout),
                    timeout=timeout,
                )
            except asyncio.TimeoutError as exc:
                raise asyncio.TimeoutError(
                    f"Oracle call timed out after {timeout:g}s"
                ) from exc

        try:
            text = await retry_async(
                _attempt,
                retry_config=self._retry_config,
                retry_on=RETRYABLE_ERRORS,
                sleep=self._sleep,
                description=f"Oracle analysis of {label}",
            )
        except RETRYABLE_ERRORS as exc:
            raise OracleUnavailableError(
                f"Analysis failed after {self._retry_config.attempts} attempts: "
                f"{exc or type(exc).__name__}"
            ) from exc

        logger.info("Oracle response for %s (%d chars)", label, len(text))
        return text


__all__ = ["OracleClient", "OracleInvoker", "OracleUnavailableError", "RETRYABLE_ERRORS"]
