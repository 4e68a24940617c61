"""Image generation adapter tests."""

import json

import httpx
import pytest

from agentflow.errors import (
    ConfigurationError,
    ExhaustedRetries,
    SchemaMismatch,
    UpstreamClientError,
    UpstreamError,
)
from agentflow.image.generator import ImageGenerator
from agentflow.image.models import ImageOptions, ImageResult


def _generator(settings_factory, upstream, **overrides) -> ImageGenerator:
    return ImageGenerator(settings_factory(**overrides), upstream.client)


@pytest.mark.asyncio
async def test_scenario_d_whitespace_stripped(settings_factory, recording_upstream):
    upstream = recording_upstream(
        lambda request: httpx.Response(
            200, json={"imageUrl": "  QUJD  ", "mime_type": "image/jpeg", "image_name": "cat"}
        )
    )

    result = await _generator(settings_factory, upstream).generate("a cat on a sofa")

    assert result == ImageResult(src="data:image/jpeg;base64,QUJD", name="cat")


@pytest.mark.asyncio
async def test_defaults_for_mime_and_name(settings_factory, recording_upstream):
    upstream = recording_upstream(
        lambda request: httpx.Response(200, json={"imageUrl": "QUJD\nRUZH", "meta": {"jobId": "42"}})
    )

    result = await _generator(settings_factory, upstream).generate("a dog")

    assert result.src == "data:image/png;base64,QUJDRUZH"
    assert result.name == "generated-image"


@pytest.mark.asyncio
async def test_posts_prompt_and_options(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(200, json={"imageUrl": "QUJD"}))

    await _generator(settings_factory, upstream).generate(
        "a lighthouse", ImageOptions(style="watercolor")
    )

    sent = upstream.requests[0]
    assert str(sent.url) == "https://n8n.example.com/webhook/image"
    assert json.loads(sent.content) == {"prompt": "a lighthouse", "options": {"style": "watercolor"}}


@pytest.mark.asyncio
async def test_options_omitted_when_not_given(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(200, json={"imageUrl": "QUJD"}))

    await _generator(settings_factory, upstream).generate("a lighthouse")

    assert json.loads(upstream.requests[0].content) == {"prompt": "a lighthouse"}


@pytest.mark.asyncio
@pytest.mark.parametrize("webhook_url", ["", "n8n.example.com/webhook", "ftp://n8n.example.com"])
async def test_misconfigured_webhook_fails_fast(settings_factory, recording_upstream, webhook_url):
    upstream = recording_upstream(lambda request: httpx.Response(200, json={"imageUrl": "QUJD"}))

    with pytest.raises(ConfigurationError):
        await _generator(settings_factory, upstream, n8n_webhook_url=webhook_url).generate("a cat")

    assert upstream.call_count == 0


@pytest.mark.asyncio
async def test_empty_payload_is_upstream_error(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(200, json={"imageUrl": "   "}))

    with pytest.raises(UpstreamError) as excinfo:
        await _generator(settings_factory, upstream).generate("a cat")

    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_invalid_payload_does_not_leak_upstream_content(settings_factory, recording_upstream):
    leaked = "internal stack trace from workflow"
    upstream = recording_upstream(lambda request: httpx.Response(200, json={"debug": leaked}))

    with pytest.raises(SchemaMismatch) as excinfo:
        await _generator(settings_factory, upstream).generate("a cat")

    assert excinfo.value.message == "Received invalid data structure from n8n webhook."
    assert "imageUrl" in excinfo.value.field_errors
    assert leaked not in str(excinfo.value)
    assert leaked not in str(excinfo.value.field_errors)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 500])
async def test_error_body_text_does_not_reach_caller(settings_factory, recording_upstream, status):
    leaked = "Traceback: db password=hunter2 at /srv/n8n/flow.js"
    upstream = recording_upstream(lambda request: httpx.Response(status, text=leaked))

    with pytest.raises(UpstreamError) as excinfo:
        await _generator(settings_factory, upstream, image_max_retries=0).generate("a cat")

    assert str(status) in excinfo.value.message
    assert "hunter2" not in excinfo.value.message
    assert "hunter2" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_unreachable_webhook_hides_transport_detail(settings_factory, recording_upstream):
    def refuse(request):
        raise httpx.ConnectError("connect to 10.0.0.7:5678 refused", request=request)

    upstream = recording_upstream(refuse)

    with pytest.raises(ExhaustedRetries) as excinfo:
        await _generator(settings_factory, upstream, image_max_retries=0).generate("a cat")

    assert excinfo.value.message == "All 1 attempts failed: Cannot reach the image webhook."
    assert "10.0.0.7" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_json_body_is_schema_mismatch(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(200, text="<html></html>"))

    with pytest.raises(SchemaMismatch):
        await _generator(settings_factory, upstream).generate("a cat")


@pytest.mark.asyncio
async def test_server_errors_retried_then_exhausted(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(500))

    with pytest.raises(ExhaustedRetries) as excinfo:
        await _generator(settings_factory, upstream, image_max_retries=2).generate("a cat")

    assert upstream.call_count == 3
    assert upstream.delays == [1.0, 2.0]
    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_client_error_not_retried(settings_factory, recording_upstream):
    upstream = recording_upstream(lambda request: httpx.Response(403, json={"message": "forbidden"}))

    with pytest.raises(UpstreamClientError) as excinfo:
        await _generator(settings_factory, upstream).generate("a cat")

    assert upstream.call_count == 1
    assert excinfo.value.message == "Client error: 403. forbidden"
