"""JSON-over-HTTP fetcher with exponential backoff retry."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from skycast.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_TIMEOUT = 10.0

Sleeper = Callable[[float], Awaitable[Any]]


async def fetch_json_with_retry(
    url: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS,
    *,
    params: dict[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    sleep: Sleeper = asyncio.sleep,
) -> Any:
    """GET ``url`` and return the parsed JSON body.

    Any failure (transport error, non-2xx status, undecodable body) raises
    a retryable FetchError and is retried up to ``max_retries`` times. The
    k-th retry waits ``initial_delay_ms * 2**(k-1)`` milliseconds; there is
    no jitter and no cap. Waiting goes through ``sleep`` so it never blocks
    the event loop. A non-retryable error propagates at once; otherwise
    the last FetchError propagates once the budget is spent.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")
    if initial_delay_ms <= 0:
        raise ValueError(f"initial_delay_ms must be > 0, got {initial_delay_ms}")

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as owned:
            return await _fetch_with_backoff(
                owned, url, params, max_retries, initial_delay_ms, sleep
            )
    return await _fetch_with_backoff(
        client, url, params, max_retries, initial_delay_ms, sleep
    )


async def _fetch_with_backoff(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str] | None,
    max_retries: int,
    initial_delay_ms: int,
    sleep: Sleeper,
) -> Any:
    delay_ms = initial_delay_ms
    for attempt in range(max_retries + 1):
        try:
            return await _fetch_once(client, url, params)
        except FetchError as e:
            if attempt >= max_retries or not e.retryable:
                logger.error(
                    "GET %s failed after %d attempt(s): %s",
                    url, attempt + 1, e,
                )
                raise
            logger.warning(
                "GET %s failed (%s), retrying in %dms (attempt %d/%d)",
                url, e, delay_ms, attempt + 1, max_retries,
            )
            await sleep(delay_ms / 1000)
            delay_ms *= 2

    raise AssertionError("unreachable")


async def _fetch_once(
    client: httpx.AsyncClient, url: str, params: dict[str, str] | None
) -> Any:
    try:
        resp = await client.get(url, params=params)
    except httpx.RequestError as e:
        raise FetchError(f"Network error: {e}", url=url) from e

    if not resp.is_success:
        raise FetchError(
            _error_message(resp), status_code=resp.status_code, url=url
        )

    try:
        return resp.json()
    except ValueError as e:
        raise FetchError(
            f"Invalid JSON in response: {e}",
            status_code=resp.status_code,
            url=url,
        ) from e


def _error_message(resp: httpx.Response) -> str:
    """Prefer the provider's own message, falling back to the status code."""
    fallback = f"HTTP error, status={resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback
