import asyncio
import json

import httpx
import pytest
import respx

from creator_api.core.errors import ProviderError
from creator_api.services.generation_provider import OpenAIChatProvider, placeholder_image_url

COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


def _provider():
    return OpenAIChatProvider(api_base="https://api.openai.com/v1", timeout_seconds=5)


@respx.mock
def test_successful_completion():
    route = respx.post(COMPLETIONS_URL).mock(
        return_value=httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": "  hi there \n"}}]}
        )
    )

    content = asyncio.run(_provider().generate("hello", "sk-user-key"))

    assert content.text == "hi there"
    assert content.image_url == placeholder_image_url("hello")
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer sk-user-key"
    body = json.loads(request.content)
    assert body["messages"] == [{"role": "user", "content": "hello"}]
    assert body["max_tokens"] == 250


@respx.mock
def test_upstream_error_message_is_surfaced():
    respx.post(COMPLETIONS_URL).mock(
        return_value=httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})
    )

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_provider().generate("hello", "sk-bad"))

    assert exc_info.value.message == "Failed to generate content from AI. Incorrect API key provided"


@respx.mock
def test_timeout_becomes_provider_error():
    route = respx.post(COMPLETIONS_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_provider().generate("hello", "sk-user-key"))

    assert "timed out" in exc_info.value.message
    assert route.call_count == 1


@respx.mock
def test_unexpected_body_is_provider_error():
    respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(200, json={"choices": []}))

    with pytest.raises(ProviderError):
        asyncio.run(_provider().generate("hello", "sk-user-key"))


def test_placeholder_uses_first_fifty_characters():
    url = placeholder_image_url("a b" * 40, base_url="https://placehold.co/512x512")
    assert url.startswith("https://placehold.co/512x512?text=")
    assert url.endswith("a%20b" * 16 + "a%20")
