"""Retry / backoff / timeout policy wrapped around outbound provider calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

_RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


def is_transient_status(status_code: int) -> bool:
    """Request timeout, rate limiting and every 5xx are worth another attempt."""
    return status_code in _RETRYABLE_CLIENT_STATUSES or status_code >= 500


def exponential_backoff(attempt: int) -> float:
    """Delay before retry *attempt* (1-based): 2, 4, 8, ... seconds."""
    return float(2**attempt)


class RetryPolicy:
    """Run an HTTP call with a per-attempt timeout and exponential retries.

    The wrapped callable is invoked once, then up to *max_retries* more
    times while it keeps failing transiently (network error, timeout or a
    status accepted by :func:`is_transient_status`).  When the budget is
    spent the last response is returned, or the last exception re-raised,
    so the caller decides how to report it.
    """

    def __init__(
        self,
        max_retries: int = 3,
        backoff: Callable[[int], float] = exponential_backoff,
        timeout: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self._max_retries = max_retries
        self._backoff = backoff
        self._timeout = timeout
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    async def execute(
        self, send: Callable[[], Awaitable[httpx.Response]]
    ) -> httpx.Response:
        """Invoke *send* under the policy and return the final response."""
        attempt = 0
        while True:
            try:
                response = await asyncio.wait_for(send(), timeout=self._timeout)
            except (httpx.TransportError, asyncio.TimeoutError) as exc:
                if attempt >= self._max_retries:
                    raise
                cause = type(exc).__name__
            else:
                if (
                    not is_transient_status(response.status_code)
                    or attempt >= self._max_retries
                ):
                    return response
                cause = f"HTTP {response.status_code}"

            attempt += 1
            delay = self._backoff(attempt)
            self._logger.warning(
                "Retry %d/%d for provider request after %.1fs due to %s",
                attempt,
                self._max_retries,
                delay,
                cause,
            )
            await self._sleep(delay)
