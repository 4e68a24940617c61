"""Contracts for the n8n image webhook."""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_MIME_TYPE = "image/png"
DEFAULT_IMAGE_NAME = "generated-image"


class ImageOptions(BaseModel):
    style: str | None = None
    size: str | None = None


class WebhookMeta(BaseModel):
    jobId: str | None = None
    duration_ms: float | None = None


class WebhookImageResponse(BaseModel):
    """Response body of the image webhook. ``imageUrl`` holds raw base64."""

    imageUrl: str
    mime_type: str | None = None
    image_name: str | None = None
    meta: WebhookMeta | None = None


class ImageResult(BaseModel):
    src: str
    name: str
