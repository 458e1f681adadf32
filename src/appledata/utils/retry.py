# ABOUTME: Retry logic for wiki page fetches using the tenacity library
# ABOUTME: Exponential backoff on transient HTTP failures plus a per-host politeness rate limiter

import asyncio
import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from appledata.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class FetchError(Exception):
    """Base exception for page fetch failures."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class FetchStatusError(FetchError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message, url)
        self.status_code = status_code


class FetchRateLimitError(FetchStatusError):
    """Raised on 429 responses."""

    pass


class FetchServerError(FetchStatusError):
    """Raised on 5xx responses."""

    pass


class FetchTimeoutError(FetchError):
    """Raised when the request times out."""

    pass


class FetchConnectionError(FetchError):
    """Raised when the connection to the wiki fails."""

    pass


TRANSIENT_ERRORS = (FetchRateLimitError, FetchServerError, FetchTimeoutError, FetchConnectionError)


class RateLimiter:
    """Spaces consecutive calls at least 1/calls_per_second apart."""

    def __init__(self, calls_per_second: float = 1.0):
        self.calls_per_second = calls_per_second
        self.last_call_time = 0.0
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        if self.calls_per_second <= 0:
            return

        async with self._lock:
            min_interval = 1.0 / self.calls_per_second
            time_since_last = time.monotonic() - self.last_call_time

            if time_since_last < min_interval:
                sleep_time = min_interval - time_since_last
                logger.debug("Rate limiting", sleep_time=round(sleep_time, 3))
                await asyncio.sleep(sleep_time)

            self.last_call_time = time.monotonic()


def convert_exception(e: Exception, url: str | None = None) -> FetchError:
    """Convert httpx exceptions to fetch-specific ones for retry decisions."""
    if isinstance(e, FetchError):
        return e
    if isinstance(e, httpx.TimeoutException):
        return FetchTimeoutError(f"Request timeout: {e}", url)
    if isinstance(e, httpx.TransportError):
        return FetchConnectionError(f"Connection failed: {e}", url)
    return FetchError(f"Fetch failed: {e}", url)


def status_error(response: httpx.Response, url: str) -> FetchStatusError:
    """The FetchStatusError subclass matching a non-success response."""
    message = f"HTTP {response.status_code} for {url}"
    if response.status_code == 429:
        return FetchRateLimitError(message, url, response.status_code)
    if response.status_code >= 500:
        return FetchServerError(message, url, response.status_code)
    return FetchStatusError(message, url, response.status_code)


def fetch_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    multiplier: float = 2.0,
    rate_limiter: RateLimiter | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry decorator for async fetch functions.

    Timeouts, connection failures, 429 and 5xx responses are retried; any
    other FetchStatusError is raised on the first attempt.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            "Retrying fetch",
                            function=func.__name__,
                            attempt=attempt.retry_state.attempt_number,
                        )
                    if rate_limiter is not None:
                        await rate_limiter.wait()
                    try:
                        return await func(*args, **kwargs)
                    except FetchError:
                        raise
                    except httpx.HTTPError as e:
                        raise convert_exception(e) from e
            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper

    return decorator
