"""Tests for the shared HTTP plumbing."""

import time
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from solana_exposure_scanner.ingestor.http import (
    JsonHttpClient,
    ProviderDecodeError,
    ProviderError,
    ProviderNotFoundError,
    ProviderTransientError,
    RateLimiter,
    RetryError,
    with_retry,
)


def _client(handler) -> JsonHttpClient:
    return JsonHttpClient(
        name="Test",
        requests_per_second=1000,
        headers={"X-Test": "1"},
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_first_call_does_not_wait(self) -> None:
        limiter = RateLimiter(max_requests_per_second=10)
        start = time.monotonic()
        await limiter.acquire()
        assert time.monotonic() - start < 0.05

    @pytest.mark.asyncio
    async def test_enforces_rate(self) -> None:
        limiter = RateLimiter(max_requests_per_second=10)  # 100ms between calls
        await limiter.acquire()
        start = time.monotonic()
        await limiter.acquire()
        assert time.monotonic() - start >= 0.08


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        call_count = 0

        @with_retry(max_retries=3)
        async def succeed() -> str:
            nonlocal call_count
            call_count += 1
            return "success"

        assert await succeed() == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_success_after_transient_failures(self) -> None:
        call_count = 0

        @with_retry(max_retries=3, base_delay=0.01)
        async def succeed_eventually() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ProviderTransientError("Not yet")
            return "success"

        assert await succeed_eventually() == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_raises_retry_error_when_exhausted(self) -> None:
        @with_retry(max_retries=2, base_delay=0.01)
        async def always_fail() -> str:
            raise ProviderTransientError("boom")

        with pytest.raises(RetryError) as exc_info:
            await always_fail()

        assert "All 3 attempts failed" in str(exc_info.value)
        assert isinstance(exc_info.value.last_exception, ProviderTransientError)

    @pytest.mark.asyncio
    async def test_non_retryable_error_propagates(self) -> None:
        call_count = 0

        @with_retry(max_retries=3, base_delay=0.01)
        async def not_found() -> str:
            nonlocal call_count
            call_count += 1
            raise ProviderNotFoundError("missing")

        with pytest.raises(ProviderNotFoundError):
            await not_found()
        assert call_count == 1


class TestJsonHttpClient:
    @pytest.mark.asyncio
    async def test_returns_json_and_sends_headers(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["X-Test"] == "1"
            return httpx.Response(200, json={"ok": True})

        async with _client(handler) as client:
            assert await client._get_json("https://api.test/x") == {"ok": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (404, ProviderNotFoundError),
            (429, ProviderTransientError),
            (503, ProviderTransientError),
            (400, ProviderError),
        ],
    )
    async def test_maps_status_codes(self, status: int, error: type[Exception]) -> None:
        client = _client(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(error):
            await client._get_json("https://api.test/x")

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderDecodeError):
            await client._get_json("https://api.test/x")

    @pytest.mark.asyncio
    async def test_transport_error_is_transient(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = _client(handler)
        with pytest.raises(ProviderTransientError):
            await client._get_json("https://api.test/x")

    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = JsonHttpClient(name="Test", http_client=http)
        await client.close()
        assert not http.is_closed
        await http.aclose()

    @pytest.mark.asyncio
    async def test_closes_owned_client(self) -> None:
        client = JsonHttpClient(name="Test")
        with patch.object(client._http, "aclose", new=AsyncMock()) as aclose:
            await client.close()
        aclose.assert_awaited_once()
