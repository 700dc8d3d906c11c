"""Tests for retry helpers."""

from unittest.mock import AsyncMock

import httpx
import pytest

from src.utils.retry import is_transient_http_error, run_with_retry


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://registry.test/boards")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"status {code}", request=request, response=response)


@pytest.mark.parametrize("code", [408, 429, 500, 502, 503, 504])
def test_transient_status_codes(code):
    assert is_transient_http_error(_status_error(code))


@pytest.mark.parametrize("code", [400, 401, 403, 404, 422])
def test_permanent_status_codes(code):
    assert not is_transient_http_error(_status_error(code))


def test_transport_errors_are_transient():
    assert is_transient_http_error(httpx.ReadTimeout("timed out"))
    assert not is_transient_http_error(ValueError("nope"))


@pytest.mark.asyncio
async def test_run_with_retry_succeeds_after_transient_failure():
    func = AsyncMock(side_effect=[_status_error(503), "ok"])
    result = await run_with_retry(func, max_retries=3, initial_delay=0)
    assert result == "ok"
    assert func.await_count == 2


@pytest.mark.asyncio
async def test_run_with_retry_raises_permanent_error_immediately():
    func = AsyncMock(side_effect=_status_error(400))
    with pytest.raises(httpx.HTTPStatusError):
        await run_with_retry(func, max_retries=3, initial_delay=0)
    assert func.await_count == 1


@pytest.mark.asyncio
async def test_run_with_retry_gives_up_after_max_retries():
    func = AsyncMock(side_effect=httpx.ConnectError("refused"))
    with pytest.raises(httpx.ConnectError):
        await run_with_retry(func, max_retries=3, initial_delay=0)
    assert func.await_count == 3


@pytest.mark.asyncio
async def test_run_with_retry_ignores_error_wording():
    func = AsyncMock(side_effect=RuntimeError("rate limit hit, retry in 30 seconds"))
    with pytest.raises(RuntimeError):
        await run_with_retry(func, max_retries=3, initial_delay=0)
    assert func.await_count == 1


@pytest.mark.asyncio
async def test_run_with_retry_requires_an_attempt():
    func = AsyncMock(return_value="ok")
    with pytest.raises(ValueError):
        await run_with_retry(func, max_retries=0)
    func.assert_not_awaited()
