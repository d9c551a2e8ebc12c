"""
Retry Utility

Retries an async operation with exponential backoff. Provider calls made by the
empathy lookups go through retry_fetch(), which turns non-2xx responses into
HTTPStatusFailure so the same retry rules apply to them.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 1.0  # seconds
DEFAULT_MAX_DELAY = 10.0  # seconds
DEFAULT_BACKOFF_FACTOR = 2.0

# Substrings that mark an error as transient ("50" catches 5xx status lines)
TRANSIENT_MARKERS = ("network", "timeout", "fetch", "50")


class HTTPStatusFailure(Exception):
    """Raised by retry_fetch() when the provider answers with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}")


def default_should_retry(error: BaseException) -> bool:
    """
    Decide whether an error is worth another attempt.

    Transport-level failures (connection errors, timeouts) are always retried.
    Anything else is retried only if its message looks like a network issue or
    a 5xx status; 4xx and other deterministic failures are not.
    """
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, Exception):
        message = str(error).lower()
        return any(marker in message for marker in TRANSIENT_MARKERS)
    return False


def compute_delay(
    attempt: int,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    max_delay: float = DEFAULT_MAX_DELAY
) -> float:
    """Delay before the next attempt, after `attempt` (1-based) has failed."""
    return min(initial_delay * (backoff_factor ** (attempt - 1)), max_delay)


async def retry(
    fn: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    should_retry: Callable[[BaseException], bool] = default_should_retry
) -> T:
    """
    Run `fn` up to `max_attempts` times with exponential backoff.

    Args:
        fn: Zero-argument coroutine function to call
        max_attempts: Total number of attempts (including the first one)
        initial_delay: Delay in seconds after the first failure
        max_delay: Upper bound for any single delay, in seconds
        backoff_factor: Multiplier applied to the delay after each failure
        should_retry: Predicate deciding whether an error is retryable

    Returns:
        Whatever `fn` returns on the first successful attempt

    Raises:
        The last error raised by `fn`, once attempts are exhausted or the
        error is not retryable.
        ValueError: If `max_attempts` is less than 1
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await fn()
        except Exception as e:
            last_error = e

            if attempt == max_attempts:
                break
            if not should_retry(e):
                break

            delay = compute_delay(attempt, initial_delay, backoff_factor, max_delay)
            logger.warning(f"Retry attempt {attempt}/{max_attempts} after {delay:.2f}s: {e}")
            await asyncio.sleep(delay)

    raise last_error


async def retry_fetch(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    should_retry: Callable[[BaseException], bool] = default_should_retry,
    **request_kwargs: Any
) -> httpx.Response:
    """
    Issue an HTTP request through retry(), failing on non-2xx responses.

    Extra keyword arguments (params, headers, json, data, timeout, ...) are
    passed to client.request().
    """
    async def _attempt() -> httpx.Response:
        response = await client.request(method, url, **request_kwargs)
        if not response.is_success:
            raise HTTPStatusFailure(response.status_code, response.reason_phrase)
        return response

    return await retry(
        _attempt,
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        backoff_factor=backoff_factor,
        should_retry=should_retry
    )
