"""Download photos supplied by URL reference instead of inline base64."""

from __future__ import annotations

import httpx

from app.core.config import FetchSettings
from app.utils.retry import RetryConfig, retry_async


class PhotoFetchError(RuntimeError):
    """Raised when a referenced photo cannot be downloaded."""


class PhotoFetcher:
    """Fetch image bytes over HTTP(S) with retries."""

    def __init__(
        self,
        settings: FetchSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:

            async def _get() -> httpx.Response:
                response = await client.get(url)
                response.raise_for_status()
                return response

            try:
                response = await retry_async(
                    _get,
                    retry_config=RetryConfig(attempts=2, backoff_seconds=0.5),
                    retry_on=(httpx.TransportError,),
                    description=f"GET {url}",
                )
            except httpx.HTTPError as exc:
                raise PhotoFetchError(f"Unable to download photo: {exc}") from exc

        content = response.content
        if len(content) > self._settings.max_bytes:
            raise PhotoFetchError(
                f"Referenced photo exceeds {self._settings.max_bytes} bytes"
            )
        return content


__all__ = ["PhotoFetchError", "PhotoFetcher"]
