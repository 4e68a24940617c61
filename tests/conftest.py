"""Fixtures: settings factory, mocked upstream transport."""

from __future__ import annotations

import inspect
from typing import Any, Callable

import httpx
import pytest

from agentflow.config import Settings
from agentflow.upstream.client import UpstreamClient

WEBHOOK_URL = "https://n8n.example.com/webhook/image"
PROXY_BASE = "https://mcp.example.com"


def make_settings(**overrides: Any) -> Settings:
    defaults: dict[str, Any] = dict(
        n8n_webhook_url=WEBHOOK_URL,
        mcp_proxy_base=PROXY_BASE,
        api_base="http://agentflow.test",
        retry_base_delay_seconds=1.0,
        image_timeout_seconds=1.0,
        scrape_timeout_seconds=1.0,
    )
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)  # type: ignore[call-arg]


class RecordingUpstream:
    """Wraps a request handler in an httpx MockTransport and records every call."""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.requests: list[httpx.Request] = []
        self.delays: list[float] = []
        self._handler = handler
        self.client = UpstreamClient(
            httpx.AsyncClient(transport=httpx.MockTransport(self._handle)),
            sleep=self._sleep,
        )

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self._handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _sleep(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def recording_upstream() -> Callable[[Callable[[httpx.Request], Any]], RecordingUpstream]:
    return RecordingUpstream


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings
