"""Shared async HTTP plumbing for provider clients.

Provides rate limiting, retry with exponential backoff, and a small JSON
client base on top of httpx that maps HTTP failures onto the provider
error hierarchy.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

import httpx

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

# Constants
MAX_REQUESTS_PER_SECOND = 10
DEFAULT_TIMEOUT_SECONDS = 15.0

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


class ProviderError(Exception):
    """Base exception for data provider errors."""


class ProviderNotFoundError(ProviderError):
    """Raised when a requested resource does not exist (e.g., 404)."""


class ProviderTransientError(ProviderError):
    """Raised for retryable/transient errors (e.g., 429/5xx, network issues)."""


class ProviderDecodeError(ProviderError):
    """Raised when a provider returns a payload that cannot be decoded."""


class RetryError(ProviderError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, last_exception: Exception | None = None) -> None:
        super().__init__(message)
        self.last_exception = last_exception


class RateLimiter:
    """Token bucket rate limiter for API requests."""

    def __init__(self, max_requests_per_second: float = MAX_REQUESTS_PER_SECOND) -> None:
        """Initialize the rate limiter.

        Args:
            max_requests_per_second: Maximum requests allowed per second.
        """
        self._min_interval = 1.0 / max_requests_per_second
        self._last_request_time: float = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until a request slot is available."""
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                wait_time = self._min_interval - elapsed
                await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()


def with_retry(
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    retry_on: tuple[type[Exception], ...] = (ProviderTransientError,),
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator for adding retry logic with exponential backoff to coroutines.

    Args:
        max_retries: Maximum number of retry attempts.
        base_delay: Base delay in seconds (doubles with each retry).
        retry_on: Tuple of exception types to retry on.

    Returns:
        Decorated coroutine function with retry logic.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    last_exception = e
                    if attempt == max_retries:
                        break

                    delay = base_delay * (2**attempt)
                    logger.warning(
                        "Attempt %d/%d failed: %s. Retrying in %.1f seconds...",
                        attempt + 1,
                        max_retries + 1,
                        str(e),
                        delay,
                    )
                    await asyncio.sleep(delay)

            raise RetryError(
                f"All {max_retries + 1} attempts failed for {func.__name__}",
                last_exception=last_exception,
            )

        return wrapper

    return decorator


class JsonHttpClient:
    """Rate-limited httpx JSON client used by the provider wrappers.

    Subclasses call `_get_json` / `_post_json`; HTTP failures surface as
    ProviderError subclasses so callers never handle httpx exceptions.
    """

    def __init__(
        self,
        *,
        name: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        requests_per_second: float = MAX_REQUESTS_PER_SECOND,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._name = name
        self._rate_limiter = RateLimiter(requests_per_second)
        self._headers = headers or {}
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        await self._rate_limiter.acquire()
        try:
            response = await self._http.request(method, url, headers=self._headers, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderTransientError(f"{self._name} request timed out: {e}") from e
        except httpx.TransportError as e:
            raise ProviderTransientError(f"{self._name} transport error: {e}") from e

        if response.status_code == 404:
            raise ProviderNotFoundError(f"{self._name} resource not found: {response.url.path}")
        if response.status_code in RETRY_STATUS_CODES:
            raise ProviderTransientError(
                f"{self._name} API error: {response.status_code} - {response.text[:200]}"
            )
        if response.is_error:
            raise ProviderError(
                f"{self._name} API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderDecodeError(f"{self._name} returned invalid JSON") from e

    async def _get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self._request_json("GET", url, params=params)

    async def _post_json(
        self,
        url: str,
        payload: Any,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self._request_json("POST", url, json=payload, params=params)

    async def close(self) -> None:
        """Close the underlying HTTP client if this wrapper created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self: "ClientT") -> "ClientT":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


ClientT = TypeVar("ClientT", bound=JsonHttpClient)
