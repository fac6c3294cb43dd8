"""Async retry utilities providing linear-multiplied backoff semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 1.0) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        return self.backoff_seconds * attempt


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    retry_config: RetryConfig | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: SleepFunc = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Await ``func`` until it succeeds or the configured attempts run out.

    Only exceptions matching ``retry_on`` are retried; anything else propagates
    immediately. The last retryable exception is re-raised once the attempts
    are exhausted.
    """
    config = retry_config or RetryConfig()
    attempt = 0
    last_exception: BaseException | None = None

    while attempt < config.attempts:
        try:
            return await func()
        except retry_on as exc:
            last_exception = exc
            attempt += 1
            if attempt >= config.attempts:
                break
            delay = config.delay_for(attempt)
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                description,
                attempt,
                config.attempts,
                exc,
                delay,
            )
            await sleep(delay)

    if last_exception is not None:
        raise last_exception
    raise RuntimeError(f"{description} failed without raising an exception")


__all__ = ["RetryConfig", "SleepFunc", "retry_async"]
