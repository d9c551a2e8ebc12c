"""
Unit Tests: Retry With Backoff

Tests compute_delay(), default_should_retry(), retry() and retry_fetch().
Sleeps are patched out, so no test waits on real backoff delays.

Run with: pytest test_retry.py -v
"""

import asyncio
import pytest
import sys
import os
from unittest.mock import patch, AsyncMock

import httpx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.retry import HTTPStatusFailure, compute_delay, default_should_retry, retry, retry_fetch


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def fetch_with(handler, **kwargs):
    async with make_client(handler) as client:
        return await retry_fetch(client, "GET", "https://provider.test/resource", **kwargs)


class TestComputeDelay:

    @pytest.mark.parametrize("attempt,expected", [(1, 1.0), (2, 2.0), (3, 4.0), (4, 8.0), (5, 10.0), (9, 10.0)])
    def test_exponential_then_capped(self, attempt, expected):
        assert compute_delay(attempt, 1.0, 2.0, 10.0) == expected


class TestDefaultShouldRetry:

    def test_server_errors_are_retried(self):
        assert default_should_retry(HTTPStatusFailure(503, "Service Unavailable"))
        assert default_should_retry(HTTPStatusFailure(500, "Internal Server Error"))

    def test_client_errors_are_not_retried(self):
        assert not default_should_retry(HTTPStatusFailure(404, "Not Found"))
        assert not default_should_retry(HTTPStatusFailure(401, "Unauthorized"))

    def test_transport_errors_are_retried(self):
        assert default_should_retry(httpx.ConnectError("connection refused"))
        assert default_should_retry(httpx.ReadTimeout("read timed out"))

    def test_message_markers(self):
        assert default_should_retry(RuntimeError("Network unreachable"))
        assert default_should_retry(RuntimeError("failed to fetch"))
        assert not default_should_retry(ValueError("bad payload"))


def test_status_failure_message():
    error = HTTPStatusFailure(502, "Bad Gateway")
    assert str(error) == "HTTP 502: Bad Gateway"
    assert error.status_code == 502


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_recovers_after_transient_failures(mock_sleep):
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise RuntimeError("network blip")
        return "ok"

    assert asyncio.run(retry(flaky, max_attempts=3)) == "ok"
    assert len(calls) == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.parametrize("max_attempts", [0, -1])
def test_retry_rejects_non_positive_attempts(max_attempts):
    calls = []

    async def fn():
        calls.append(1)
        return "ok"

    with pytest.raises(ValueError, match="max_attempts must be at least 1"):
        asyncio.run(retry(fn, max_attempts=max_attempts))
    assert calls == []


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_raises_last_error_when_exhausted(mock_sleep):
    calls = []

    async def always_fails():
        calls.append(1)
        raise RuntimeError(f"timeout #{len(calls)}")

    with pytest.raises(RuntimeError, match="timeout #3"):
        asyncio.run(retry(always_fails, max_attempts=3))
    assert len(calls) == 3
    assert mock_sleep.await_count == 2


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_stops_on_non_retryable_error(mock_sleep):
    calls = []

    async def bad_input():
        calls.append(1)
        raise ValueError("invalid")

    with pytest.raises(ValueError):
        asyncio.run(retry(bad_input, max_attempts=3))
    assert len(calls) == 1
    mock_sleep.assert_not_awaited()


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_fetch_retries_503_then_succeeds(mock_sleep):
    statuses = [503, 503, 200]

    def handler(request):
        return httpx.Response(statuses.pop(0), json={"ok": True})

    response = asyncio.run(fetch_with(handler, max_attempts=3))
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert mock_sleep.await_count == 2


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_fetch_does_not_retry_404(mock_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    with pytest.raises(HTTPStatusFailure) as exc_info:
        asyncio.run(fetch_with(handler, max_attempts=3))
    assert exc_info.value.status_code == 404
    assert len(calls) == 1
    mock_sleep.assert_not_awaited()


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_retry_fetch_propagates_connect_error(mock_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(httpx.ConnectError):
        asyncio.run(fetch_with(handler, max_attempts=2))
    assert len(calls) == 2
    assert mock_sleep.await_count == 1


def test_retry_fetch_passes_request_kwargs():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    asyncio.run(fetch_with(handler, params={"tags": "hope"}, headers={"Authorization": "key"}))
    assert seen == {"params": {"tags": "hope"}, "auth": "key"}
