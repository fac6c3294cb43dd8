try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import httpx
import pytest

from app.clients.gemini import GeminiModelError
from app.core.config import OracleSettings
from app.services.oracle import OracleInvoker, OracleUnavailableError

try:
    from ._fakes import FakeOracleClient, RecordingSleep, TimingOutOracleClient
except ImportError:  # pragma: no cover - fallback for direct execution
    from _fakes import FakeOracleClient, RecordingSleep, TimingOutOracleClient  # type: ignore


class ScriptedClient(FakeOracleClient):
    """Raise the queued errors in order, then answer."""

    def __init__(self, errors, answer="{}") -> None:
        super().__init__()
        self.errors = list(errors)
        self.answer = answer

    async def generate(self, prompt, image, *, mime_type="image/jpeg", timeout=None):
        self.calls.append({"prompt": prompt, "timeout": timeout})
        if self.errors:
            raise self.errors.pop(0)
        return self.answer


class SlowClient(FakeOracleClient):
    async def generate(self, prompt, image, *, mime_type="image/jpeg", timeout=None):
        self.calls.append({"prompt": prompt, "timeout": timeout})
        await asyncio.sleep(1)
        return "{}"


def _settings(**overrides) -> OracleSettings:
    values = {"timeout_seconds": 5.0, "max_attempts": 3, "backoff_seconds": 2.0}
    values.update(overrides)
    return OracleSettings(**values)


@pytest.mark.asyncio
async def test_invoke_returns_text_and_passes_timeout():
    client = ScriptedClient([], answer='{"overallScore": 81}')
    invoker = OracleInvoker(client, _settings(), sleep=RecordingSleep())

    text = await invoker.invoke("prompt", b"jpeg")

    assert text == '{"overallScore": 81}'
    assert client.calls == [{"prompt": "prompt", "timeout": 5.0}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        GeminiModelError("503 overloaded"),
        httpx.ConnectError("connection refused"),
        asyncio.TimeoutError(),
    ],
)
async def test_invoke_retries_transient_failures_with_linear_backoff(error):
    client = ScriptedClient([error, error], answer="ok")
    sleep = RecordingSleep()
    invoker = OracleInvoker(client, _settings(), sleep=sleep)

    assert await invoker.invoke("prompt", b"jpeg") == "ok"
    assert len(client.calls) == 3
    assert sleep.delays == [2.0, 4.0]


@pytest.mark.asyncio
async def test_invoke_gives_up_after_three_timeouts():
    client = TimingOutOracleClient()
    sleep = RecordingSleep()
    invoker = OracleInvoker(client, _settings(timeout_seconds=45), sleep=sleep)

    with pytest.raises(OracleUnavailableError) as excinfo:
        await invoker.invoke("prompt", b"jpeg")

    assert len(client.calls) == 3
    assert sleep.delays == [2.0, 4.0]
    message = str(excinfo.value)
    assert "after 3 attempts" in message
    assert "timed out after 45s" in message


@pytest.mark.asyncio
async def test_invoke_enforces_wall_clock_timeout():
    client = SlowClient()
    invoker = OracleInvoker(
        client, _settings(timeout_seconds=0.01, max_attempts=2), sleep=RecordingSleep()
    )

    with pytest.raises(OracleUnavailableError, match="timed out"):
        await invoker.invoke("prompt", b"jpeg")

    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_invoke_does_not_retry_programming_errors():
    client = ScriptedClient([ValueError("bad request shape")])
    sleep = RecordingSleep()
    invoker = OracleInvoker(client, _settings(), sleep=sleep)

    with pytest.raises(ValueError):
        await invoker.invoke("prompt", b"jpeg")

    assert len(client.calls) == 1
    assert sleep.delays == []


def test_is_configured_reflects_client():
    assert OracleInvoker(FakeOracleClient(), _settings()).is_configured is True
    unconfigured = FakeOracleClient(configured=False)
    assert OracleInvoker(unconfigured, _settings()).is_configured is False
