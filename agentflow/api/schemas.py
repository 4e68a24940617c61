"""Request/response Pydantic models for the image and prompt endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ImagePromptRequest(BaseModel):
    prompt: str = Field(
        min_length=3,
        max_length=1000,
        description="Prompt must be 3-1000 characters.",
    )
    style: str | None = None
    size: str | None = None


class PromptTopicRequest(BaseModel):
    topic: str = Field(min_length=2, max_length=100)


class ActionState(BaseModel):
    """Outcome of a form-style action: a user-facing message plus optional data."""

    message: str
    data: Any | None = None
    error: bool = False
    fieldErrors: dict[str, list[str]] | None = None
