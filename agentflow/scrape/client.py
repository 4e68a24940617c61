"""Client for this service's own ``POST /api/scrape`` endpoint."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from agentflow.errors import (
    InputValidationError,
    SchemaMismatch,
    UpstreamClientError,
    UpstreamServerError,
)
from agentflow.scrape.models import ScrapeRequest, ScrapeResult
from agentflow.scrape.proxy import SCRAPE_PATH
from agentflow.upstream.client import RetryPolicy, UpstreamClient
from agentflow.upstream.validation import field_errors, validate

logger = logging.getLogger(__name__)

INVALID_RESULT_MESSAGE = "Received invalid data from scraping service."


class ScrapeApiClient:
    """Calls ``<api_base>/api/scrape`` and validates the reply strictly.

    Unlike the proxy, no defaults are applied: the server already normalized
    the result, so anything missing is an error.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        api_base: str,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._upstream = upstream
        self._endpoint = f"{api_base.rstrip('/')}{SCRAPE_PATH}"
        # The server already enforces its own upstream timeout; leave headroom.
        self._policy = policy or RetryPolicy(max_retries=0, timeout=35.0, retry_server_errors=False)

    async def scrape(self, url: str, **options) -> ScrapeResult:
        try:
            request = ScrapeRequest(url=url, **options)
        except ValidationError as exc:
            raise InputValidationError("Invalid request body.", field_errors(exc)) from exc

        try:
            response = await self._upstream.send(
                "POST", self._endpoint, self._policy, json=request.to_upstream()
            )
        except (UpstreamClientError, UpstreamServerError) as exc:
            logger.warning(
                "scrape API returned an error",
                extra={"status": exc.upstream_status, "url": url},
            )
            raise

        try:
            payload = response.json()
        except ValueError as exc:
            raise SchemaMismatch(
                INVALID_RESULT_MESSAGE,
                {"_root": ["Response body is not valid JSON"]},
            ) from exc

        return validate(payload, ScrapeResult, message=INVALID_RESULT_MESSAGE)
