try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from app.clients.photo_fetcher import PhotoFetcher, PhotoFetchError
from app.core.config import FetchSettings

URL = "https://cdn.example.com/photos/1.jpg"


def _fetcher(handler, **settings) -> PhotoFetcher:
    return PhotoFetcher(FetchSettings(**settings), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_body():
    fetcher = _fetcher(lambda request: httpx.Response(200, content=b"jpeg-bytes"))

    assert await fetcher.fetch(URL) == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_fetch_wraps_http_status_errors():
    fetcher = _fetcher(lambda request: httpx.Response(404))

    with pytest.raises(PhotoFetchError, match="Unable to download photo"):
        await fetcher.fetch(URL)


@pytest.mark.asyncio
async def test_fetch_enforces_size_limit():
    fetcher = _fetcher(
        lambda request: httpx.Response(200, content=b"x" * 64), max_bytes=32
    )

    with pytest.raises(PhotoFetchError, match="exceeds"):
        await fetcher.fetch(URL)


@pytest.mark.asyncio
async def test_fetch_retries_transport_errors_once():
    attempts = []

    def handler(request):
        attempts.append(request.url)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, content=b"ok")

    fetcher = _fetcher(handler)

    assert await fetcher.fetch(URL) == b"ok"
    assert len(attempts) == 2
