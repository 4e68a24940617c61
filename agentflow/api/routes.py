"""POST /api/scrape, POST /api/image, POST /api/prompts endpoint handlers."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agentflow.api.schemas import ActionState, ImagePromptRequest, PromptTopicRequest
from agentflow.errors import AgentFlowError
from agentflow.image.generator import ImageGenerator
from agentflow.image.models import ImageOptions
from agentflow.prompts.generator import PromptGenerator
from agentflow.scrape.proxy import CORS_HEADERS, ScrapeProxy
from agentflow.upstream.validation import field_errors

logger = logging.getLogger(__name__)

PROMPT_MODEL_FAILURE = "Failed to generate prompts: the prompt model is unavailable."

router = APIRouter(prefix="/api")


def _get_scrape_proxy(request: Request) -> ScrapeProxy:
    return request.app.state.scrape_proxy


def _get_image_generator(request: Request) -> ImageGenerator:
    return request.app.state.image_generator


def _get_prompt_generator(request: Request) -> PromptGenerator:
    return request.app.state.prompt_generator


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return {}


def _action_response(status_code: int, state: ActionState) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=state.model_dump(exclude_none=True))


@router.options("/scrape")
async def scrape_options() -> Response:
    return Response(headers=CORS_HEADERS)


@router.post("/scrape")
async def scrape(
    request: Request,
    proxy: ScrapeProxy = Depends(_get_scrape_proxy),
) -> JSONResponse:
    outcome = await proxy.handle(await _json_body(request))
    return JSONResponse(status_code=outcome.status_code, content=outcome.body, headers=CORS_HEADERS)


@router.post("/image")
async def generate_image(
    request: Request,
    generator: ImageGenerator = Depends(_get_image_generator),
) -> JSONResponse:
    try:
        body = ImagePromptRequest.model_validate(await _json_body(request))
    except ValidationError as exc:
        return _action_response(
            400,
            ActionState(message="Invalid prompt.", error=True, fieldErrors=field_errors(exc)),
        )

    options = None
    if body.style is not None or body.size is not None:
        options = ImageOptions(style=body.style, size=body.size)

    try:
        result = await generator.generate(body.prompt, options)
    except AgentFlowError as exc:
        return _action_response(
            exc.status_code,
            ActionState(message=f"Failed to generate image: {exc.message}", error=True),
        )

    return _action_response(
        200,
        ActionState(message="Image generated successfully!", data=result.model_dump()),
    )


@router.post("/prompts")
async def generate_prompts(
    request: Request,
    generator: PromptGenerator = Depends(_get_prompt_generator),
) -> JSONResponse:
    try:
        body = PromptTopicRequest.model_validate(await _json_body(request))
    except ValidationError as exc:
        return _action_response(
            400,
            ActionState(message="Invalid topic.", error=True, fieldErrors=field_errors(exc)),
        )

    try:
        prompts = await generator.generate(body.topic)
    except AgentFlowError as exc:
        return _action_response(
            exc.status_code,
            ActionState(message=f"Failed to generate prompts: {exc.message}", error=True),
        )
    except Exception:
        logger.exception("prompt generation failed", extra={"topic": body.topic[:100]})
        return _action_response(
            502,
            ActionState(message=PROMPT_MODEL_FAILURE, error=True),
        )

    return _action_response(200, ActionState(message="Prompts generated!", data=prompts))
