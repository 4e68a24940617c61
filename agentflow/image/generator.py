"""Image generation through the n8n workflow webhook."""

from __future__ import annotations

import logging
import re

from agentflow.config import Settings
from agentflow.errors import (
    ConfigurationError,
    ExhaustedRetries,
    NetworkError,
    SchemaMismatch,
    UpstreamClientError,
    UpstreamError,
    UpstreamServerError,
    UpstreamTimeout,
)
from agentflow.image.models import (
    DEFAULT_IMAGE_NAME,
    DEFAULT_MIME_TYPE,
    ImageOptions,
    ImageResult,
    WebhookImageResponse,
)
from agentflow.upstream.client import RetryPolicy, UpstreamClient
from agentflow.upstream.validation import validate

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

INVALID_RESPONSE_MESSAGE = "Received invalid data structure from n8n webhook."


def _webhook_failure(exc: UpstreamError) -> UpstreamError:
    """Rebuild a transport failure so no webhook body text reaches the caller.

    Only the status and, for 4xx replies, the message the webhook put in
    its JSON body survive.
    """
    if isinstance(exc, ExhaustedRetries):
        return ExhaustedRetries(exc.attempts, _webhook_failure(exc.last_error))
    if isinstance(exc, UpstreamTimeout):
        return UpstreamTimeout("Timeout communicating with the image webhook.")
    if isinstance(exc, UpstreamClientError):
        return UpstreamClientError(exc.upstream_status, exc.reported or "")
    if isinstance(exc, UpstreamServerError):
        return UpstreamServerError(exc.upstream_status, "")
    if isinstance(exc, NetworkError):
        return NetworkError("Cannot reach the image webhook.")
    return UpstreamError("The image generation service failed.")


class ImageGenerator:
    """Posts prompts to the image webhook and turns the reply into a data URL."""

    def __init__(self, settings: Settings, upstream: UpstreamClient) -> None:
        self._webhook_url = settings.n8n_webhook_url
        self._upstream = upstream
        self._policy = RetryPolicy(
            max_retries=settings.image_max_retries,
            base_delay=settings.retry_base_delay_seconds,
            timeout=settings.image_timeout_seconds,
        )

    async def generate(
        self,
        prompt: str,
        options: ImageOptions | None = None,
    ) -> ImageResult:
        """Generate one image for *prompt*.

        Raises ``ConfigurationError`` before any network call when the webhook
        address is unusable, and ``UpstreamError`` (or a subclass) when the
        webhook fails or returns something unusable.
        """
        if not self._webhook_url.startswith("http"):
            logger.error("N8N_WEBHOOK_URL is not configured correctly")
            raise ConfigurationError("N8N_WEBHOOK_URL is not configured correctly.")

        body: dict = {"prompt": prompt}
        if options is not None:
            body["options"] = options.model_dump(exclude_none=True)

        try:
            response = await self._upstream.send(
                "POST", self._webhook_url, self._policy, json=body
            )
        except UpstreamError as exc:
            raise _webhook_failure(exc) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SchemaMismatch(
                INVALID_RESPONSE_MESSAGE,
                {"_root": ["Response body is not valid JSON"]},
            ) from exc

        data = validate(payload, WebhookImageResponse, message=INVALID_RESPONSE_MESSAGE)
        if data.meta is not None:
            logger.info("n8n metadata", extra={"meta": data.meta.model_dump(exclude_none=True)})

        encoded = _WHITESPACE_RE.sub("", data.imageUrl)
        if not encoded:
            raise UpstreamError("The image generation service returned an empty image.")

        mime_type = data.mime_type or DEFAULT_MIME_TYPE
        name = data.image_name or DEFAULT_IMAGE_NAME
        logger.info(
            "image generated",
            extra={"mime_type": mime_type, "image_name": name, "payload_chars": len(encoded)},
        )
        return ImageResult(src=f"data:{mime_type};base64,{encoded}", name=name)
