"""HTTP client wrapper with per-attempt timeout and linear-backoff retry."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from agentflow.errors import (
    ExhaustedRetries,
    NetworkError,
    UpstreamClientError,
    UpstreamError,
    UpstreamServerError,
    UpstreamTimeout,
)

logger = logging.getLogger(__name__)

_MAX_DETAIL_CHARS = 200


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for a single upstream call site.

    ``max_retries`` counts attempts after the first one, so the default
    makes three attempts in total.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    timeout: float = 20.0
    retry_server_errors: bool = True

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (attempt + 1)


def reported_message(response: httpx.Response) -> str | None:
    """The JSON ``error`` or ``message`` field of an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        for key in ("error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def extract_error_message(response: httpx.Response) -> str:
    """Best-effort human-readable message from an error response.

    Prefers a JSON ``error`` or ``message`` field, then the (truncated) body
    text, then the reason phrase.
    """
    reported = reported_message(response)
    if reported:
        return reported

    text = response.text.strip()
    if text:
        return text[:_MAX_DETAIL_CHARS]
    return response.reason_phrase


class UpstreamClient:
    """Sends requests through a shared ``httpx.AsyncClient`` under a RetryPolicy."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._sleep = sleep

    async def send(
        self,
        method: str,
        url: str,
        policy: RetryPolicy,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send the request, retrying transient failures.

        Raises ``UpstreamClientError`` on a 4xx (no retry) and
        ``ExhaustedRetries`` once every attempt has failed.
        """
        attempts = 1 + policy.max_retries
        last_error: UpstreamError | None = None

        for attempt in range(attempts):
            try:
                return await self._attempt(method, url, policy, **kwargs)
            except (UpstreamServerError, NetworkError, UpstreamTimeout) as exc:
                if isinstance(exc, UpstreamServerError) and not policy.retry_server_errors:
                    raise
                last_error = exc

            if attempt < attempts - 1:
                delay = policy.delay_for(attempt)
                logger.warning(
                    "upstream attempt failed, retrying",
                    extra={
                        "url": url,
                        "attempt": attempt + 1,
                        "max_attempts": attempts,
                        "delay_seconds": delay,
                        "error": last_error.message,
                    },
                )
                await self._sleep(delay)

        assert last_error is not None
        logger.error(
            "upstream retries exhausted",
            extra={"url": url, "attempts": attempts, "error": last_error.message},
        )
        raise ExhaustedRetries(attempts, last_error) from last_error

    async def _attempt(
        self,
        method: str,
        url: str,
        policy: RetryPolicy,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, **kwargs),
                timeout=policy.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise UpstreamTimeout(
                f"No response from upstream within {policy.timeout:g}s"
            ) from exc
        except httpx.TransportError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

        status = response.status_code
        if 400 <= status < 500:
            raise UpstreamClientError(status, extract_error_message(response), reported_message(response))
        if status >= 500:
            raise UpstreamServerError(status, extract_error_message(response), reported_message(response))
        return response
