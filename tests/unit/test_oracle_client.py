"""
Tests for the HTTP completion client.
"""

import json

import httpx
import pytest

from intake_bot.core.exceptions import OracleError
from intake_bot.oracle.client import HttpCompletionClient

BASE_URL = "https://llm.test/v1"


def _client(handler) -> HttpCompletionClient:
    return HttpCompletionClient(
        base_url=BASE_URL,
        api_key="secret",
        model="test-model",
        temperature=0.1,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.asyncio
async def test_complete_returns_message_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("  true \n"))

    client = _client(handler)
    answer = await client.complete("¿Está lista?")
    await client.close()

    assert answer == "true"
    assert seen["url"] == f"{BASE_URL}/chat/completions"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "¿Está lista?"}],
        "temperature": 0.1,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="internal error"),
        httpx.Response(429, text="slow down"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json=_completion("   ")),
        httpx.Response(200, json=_completion(None)),
    ],
)
async def test_unusable_responses_raise(response: httpx.Response):
    client = _client(lambda request: response)

    with pytest.raises(OracleError):
        await client.complete("prompt")


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(OracleError):
        await _client(handler).complete("prompt")


@pytest.mark.asyncio
async def test_unconfigured_client_raises():
    client = HttpCompletionClient(base_url="")

    assert not client.is_configured
    with pytest.raises(OracleError):
        await client.complete("prompt")
