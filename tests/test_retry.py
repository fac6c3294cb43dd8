try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from app.utils.retry import RetryConfig, retry_async

try:
    from ._fakes import RecordingSleep
except ImportError:  # pragma: no cover - fallback for direct execution
    from _fakes import RecordingSleep  # type: ignore


class Flaky:
    def __init__(self, failures: int, error: Exception) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "done"


@pytest.mark.asyncio
async def test_retry_async_succeeds_after_transient_failures():
    func = Flaky(2, ConnectionError("reset"))
    sleep = RecordingSleep()

    result = await retry_async(
        func,
        retry_config=RetryConfig(attempts=3, backoff_seconds=2.0),
        retry_on=(ConnectionError,),
        sleep=sleep,
    )

    assert result == "done"
    assert func.calls == 3
    assert sleep.delays == [2.0, 4.0]


@pytest.mark.asyncio
async def test_retry_async_reraises_last_error_when_attempts_run_out():
    func = Flaky(5, ConnectionError("still down"))
    sleep = RecordingSleep()

    with pytest.raises(ConnectionError, match="still down"):
        await retry_async(
            func,
            retry_config=RetryConfig(attempts=3, backoff_seconds=1.0),
            retry_on=(ConnectionError,),
            sleep=sleep,
        )

    assert func.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_retry_async_does_not_retry_unlisted_errors():
    func = Flaky(1, KeyError("boom"))
    sleep = RecordingSleep()

    with pytest.raises(KeyError):
        await retry_async(func, retry_on=(ConnectionError,), sleep=sleep)

    assert func.calls == 1
    assert sleep.delays == []


def test_retry_config_requires_at_least_one_attempt():
    with pytest.raises(ValueError):
        RetryConfig(attempts=0)
