"""
Retry utilities for transient registry errors.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# HTTP status codes that represent transient upstream errors worth retrying.
# Everything else (400, 401, 404, ...) is permanent.
_TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({
    408,  # Request timeout
    429,  # Too many requests
    500,  # Internal server error
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})


def is_transient_http_error(exception: Exception) -> bool:
    """Check if an httpx error is transient and worth retrying.

    Transport-level failures (connect errors, read timeouts, dropped
    connections) are always transient. Status errors are transient only for
    the codes in ``_TRANSIENT_STATUS_CODES``.
    """
    if isinstance(exception, httpx.TransportError):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in _TRANSIENT_STATUS_CODES
    return False


async def run_with_retry(
    func: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    initial_delay: float = 0.5,
    backoff_factor: float = 2.0,
) -> Any:
    """
    Execute an async function with retry logic for transient HTTP errors.

    Args:
        func: Async function to execute (no parameters)
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds before first retry
        backoff_factor: Multiplier for delay between retries

    Returns:
        Result from the function

    Raises:
        Exception: The last error once retries are exhausted, or the first
            non-transient error
    """
    for attempt in range(max_retries):
        try:
            return await func()
        except Exception as e:
            if not is_transient_http_error(e) or attempt >= max_retries - 1:
                raise

            wait_time = initial_delay * (backoff_factor**attempt)
            logger.warning(
                "Transient HTTP error detected (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                e,
                attempt + 1,
                max_retries,
                wait_time,
            )
            await asyncio.sleep(wait_time)

    raise ValueError(f"max_retries must be at least 1, got {max_retries}")
