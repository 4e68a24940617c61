"""Scrape proxy: validates a scrape request and forwards it to the MCP proxy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from agentflow.config import Settings
from agentflow.errors import (
    ExhaustedRetries,
    NetworkError,
    SchemaMismatch,
    UpstreamClientError,
    UpstreamError,
    UpstreamServerError,
    UpstreamTimeout,
)
from agentflow.scrape.models import ProxyScrapeResponse, ScrapeRequest
from agentflow.upstream.client import RetryPolicy, UpstreamClient
from agentflow.upstream.validation import field_errors, validate

logger = logging.getLogger(__name__)

SCRAPE_PATH = "/api/scrape"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@dataclass
class ProxyOutcome:
    """Terminal state of one scrape request: HTTP status plus JSON body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def timeout_message(timeout: float) -> str:
    return f"Timeout communicating with MCP proxy ({timeout:g}s)."


class ScrapeProxy:
    """Forwards validated scrape requests to ``<MCP_PROXY_BASE>/api/scrape``."""

    def __init__(self, settings: Settings, upstream: UpstreamClient) -> None:
        self._base = settings.mcp_proxy_base.rstrip("/")
        self._upstream = upstream
        self._policy = RetryPolicy(
            max_retries=settings.scrape_max_retries,
            base_delay=settings.retry_base_delay_seconds,
            timeout=settings.scrape_timeout_seconds,
            retry_server_errors=False,
        )

    async def handle(self, raw_body: Any) -> ProxyOutcome:
        """Run one request through validate -> forward -> normalize."""
        try:
            request = ScrapeRequest.model_validate(raw_body if isinstance(raw_body, dict) else {})
        except ValidationError as exc:
            details = field_errors(exc)
            logger.info("scrape request rejected", extra={"fields": sorted(details)})
            return ProxyOutcome(400, {"error": "Invalid request body.", "details": details})

        if not self._base:
            logger.error("scrape requested but MCP_PROXY_BASE is not set")
            return ProxyOutcome(500, {"error": "Scraping service is not configured on the server."})

        try:
            return await self._forward(request)
        except SchemaMismatch as exc:
            logger.warning("invalid payload from MCP proxy", extra={"fields": sorted(exc.field_errors)})
            return ProxyOutcome(500, {"error": exc.message, "details": exc.field_errors})
        except UpstreamError as exc:
            return self._upstream_failure(exc)
        except Exception as exc:
            logger.exception("scrape failed unexpectedly", extra={"url": request.url})
            return ProxyOutcome(
                500,
                {"error": "Failed to scrape the URL.", "details": str(exc) or "Unexpected error"},
            )

    async def _forward(self, request: ScrapeRequest) -> ProxyOutcome:
        endpoint = f"{self._base}{SCRAPE_PATH}"
        logger.info(
            "forwarding scrape request",
            extra={"url": request.url, "max_depth": request.max_depth, "pages": request.pages},
        )
        response = await self._upstream.send(
            "POST", endpoint, self._policy, json=request.to_upstream()
        )

        payload = response.json()
        data = validate(
            payload,
            ProxyScrapeResponse,
            message="Received invalid data from scraping service.",
        )
        result = data.normalize()
        logger.info(
            "scrape completed",
            extra={"url": request.url, "links": len(result.links)},
        )
        return ProxyOutcome(200, result.model_dump())

    def _upstream_failure(self, exc: UpstreamError) -> ProxyOutcome:
        cause = exc.last_error if isinstance(exc, ExhaustedRetries) else exc

        if isinstance(cause, UpstreamTimeout):
            logger.warning("MCP proxy timed out", extra={"timeout": self._policy.timeout})
            return ProxyOutcome(504, {"error": timeout_message(self._policy.timeout)})
        if isinstance(cause, (UpstreamClientError, UpstreamServerError)):
            logger.warning(
                "MCP proxy returned an error",
                extra={"upstream_status": cause.upstream_status},
            )
            return ProxyOutcome(
                502,
                {"error": f"MCP proxy responded {cause.upstream_status}: {cause.detail}"},
            )
        if isinstance(cause, NetworkError):
            logger.warning("MCP proxy unreachable", extra={"error": cause.message})
            return ProxyOutcome(502, {"error": f"Cannot reach MCP proxy: {cause.message}"})
        return ProxyOutcome(502, {"error": cause.message})
