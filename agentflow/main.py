"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from agentflow.api.routes import router
from agentflow.config import get_settings
from agentflow.image.generator import ImageGenerator
from agentflow.logging_config import setup_logging
from agentflow.prompts.generator import PromptGenerator
from agentflow.scrape.proxy import ScrapeProxy
from agentflow.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting agentflow")

    # Per-attempt timeouts are enforced by UpstreamClient, not by httpx
    http_client = httpx.AsyncClient(timeout=None)
    upstream = UpstreamClient(http_client)

    app.state.settings = settings
    app.state.scrape_proxy = ScrapeProxy(settings, upstream)
    app.state.image_generator = ImageGenerator(settings, upstream)
    app.state.prompt_generator = PromptGenerator(settings)

    logger.info(
        "agentflow ready",
        extra={
            "scrape_configured": bool(settings.mcp_proxy_base),
            "image_configured": settings.n8n_webhook_url.startswith("http"),
            "llm_provider": settings.llm_provider,
            "prompt_llm": settings.prompt_llm,
        },
    )

    yield

    logger.info("shutting down agentflow")
    await http_client.aclose()


app = FastAPI(title="AgentFlow", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
