try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from google.api_core.exceptions import NotFound

from app.clients import gemini as gemini_module
from app.clients.gemini import GeminiClient, GeminiModelError
from app.core.config import GeminiSettings


class FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


def _fake_model_factory(available: set[str], seen: list):
    class FakeModel:
        def __init__(self, name: str) -> None:
            self.name = name

        def generate_content(self, contents, request_options=None):
            seen.append(
                {"model": self.name, "contents": contents, "options": request_options}
            )
            if self.name not in available:
                raise NotFound(f"{self.name} not found")
            return FakeResponse('{"overallScore": 77}')

    return FakeModel


@pytest.mark.asyncio
async def test_generate_requires_api_key():
    client = GeminiClient(GeminiSettings(api_key=None))

    assert client.is_configured is False
    with pytest.raises(GeminiModelError):
        await client.generate("prompt", b"jpeg")


@pytest.mark.asyncio
async def test_generate_sends_prompt_with_inline_image(monkeypatch):
    seen: list = []
    monkeypatch.setattr(
        gemini_module.genai,
        "GenerativeModel",
        _fake_model_factory({"gemini-1.5-flash"}, seen),
    )
    client = GeminiClient(GeminiSettings(api_key="key"))

    text = await client.generate("rate this", b"jpeg-bytes", timeout=30)

    assert text == '{"overallScore": 77}'
    [call] = seen
    assert call["contents"] == [
        "rate this",
        {"mime_type": "image/jpeg", "data": b"jpeg-bytes"},
    ]
    assert call["options"] == {"timeout": 30}


@pytest.mark.asyncio
async def test_generate_falls_back_when_configured_model_is_missing(monkeypatch):
    seen: list = []
    monkeypatch.setattr(
        gemini_module.genai,
        "GenerativeModel",
        _fake_model_factory({"gemini-2.0-flash"}, seen),
    )
    client = GeminiClient(
        GeminiSettings(api_key="key", vision_model_name="gemini-retired")
    )

    await client.generate("prompt", b"jpeg")

    assert [call["model"] for call in seen] == [
        "gemini-retired",
        "gemini-1.5-flash",
        "gemini-2.0-flash",
    ]


@pytest.mark.asyncio
async def test_generate_reports_unavailable_models(monkeypatch):
    monkeypatch.setattr(
        gemini_module.genai, "GenerativeModel", _fake_model_factory(set(), [])
    )
    client = GeminiClient(GeminiSettings(api_key="key"))

    with pytest.raises(GeminiModelError, match="GEMINI_VISION_MODEL_NAME"):
        await client.generate("prompt", b"jpeg")


def test_collect_candidates_deduplicates_and_skips_blanks():
    assert GeminiClient._collect_candidates(
        " gemini-1.5-flash ", ("gemini-1.5-flash", "", "gemini-2.0-flash")
    ) == ["gemini-1.5-flash", "gemini-2.0-flash"]
