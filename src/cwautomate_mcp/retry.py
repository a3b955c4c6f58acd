"""Async retry with exponential backoff for idempotent Automate reads."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MaxRetriesExceeded(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, last_error: Exception, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


def is_transient_http_error(exc: Exception) -> bool:
    """True for network failures and 5xx responses."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


async def retry_with_backoff(
    fn: Callable[..., Coroutine[Any, Any, T]],
    *args: Any,
    max_retries: int = 2,
    backoff_base: float = 1.0,
    backoff_max: float = 30.0,
    retriable: Callable[[Exception], bool] = is_transient_http_error,
    **kwargs: Any,
) -> T:
    """Await ``fn(*args, **kwargs)``, retrying transient failures.

    Args:
        fn: Async function to call. Must be safe to repeat.
        max_retries: Extra attempts after the first one (0 = no retries).
        backoff_base: Delay before the first retry; doubles on each retry.
        backoff_max: Upper bound for a single delay.
        retriable: Predicate deciding whether an error is worth retrying.

    Raises:
        MaxRetriesExceeded: The last attempt failed with a retriable error.
        Exception: Any non-retriable error, unchanged.
    """
    attempt = 0
    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as exc:
            if not retriable(exc):
                raise
            if attempt >= max_retries:
                raise MaxRetriesExceeded(exc, attempt + 1) from exc
            delay = min(backoff_base * (2**attempt), backoff_max)
            attempt += 1
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt,
                max_retries + 1,
                type(exc).__name__,
                delay,
            )
            await asyncio.sleep(delay)
