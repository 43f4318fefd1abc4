from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from story_analyst.config import Settings
from story_analyst.errors import MalformedResponseError, UpstreamError
from story_analyst.llm.gateway import MessagesGateway, OpenAIGateway, build_gateway

ENDPOINT = "https://model.example.test/v1/messages"


def _gateway(handler: Any, **kwargs: Any) -> MessagesGateway:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MessagesGateway(endpoint=ENDPOINT, model="test-model", api_key="secret", client=client, **kwargs)


def test_messages_request_shape_and_text_block() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["headers"] = request.headers
        return httpx.Response(
            200,
            json={"content": [{"type": "tool_use", "id": "t1"}, {"type": "text", "text": "hello"}]},
        )

    text = _gateway(handler).complete("the prompt")
    assert text == "hello"
    assert seen["body"] == {
        "model": "test-model",
        "max_tokens": 4096,
        "messages": [{"role": "user", "content": "the prompt"}],
    }
    assert seen["headers"]["x-api-key"] == "secret"
    assert seen["headers"]["anthropic-version"] == "2023-06-01"


def test_non_success_status_raises_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(529, text="overloaded")

    with pytest.raises(UpstreamError) as ei:
        _gateway(handler).complete("p")
    assert ei.value.status == 529
    assert ei.value.body == "overloaded"
    assert "529" in ei.value.user_message


def test_missing_text_block_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": [{"type": "image"}]})

    with pytest.raises(MalformedResponseError):
        _gateway(handler).complete("p")


def test_non_json_body_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(MalformedResponseError):
        _gateway(handler).complete("p")


def test_timeout_becomes_upstream_error_without_retry() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamError) as ei:
        _gateway(handler).complete("p", timeout=0.5)
    assert ei.value.status is None
    assert len(calls) == 1


class _FakeCompletions:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.kwargs: dict[str, Any] = {}

    def create(self, **kwargs: Any) -> Any:
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def _fake_openai(completions: _FakeCompletions) -> Any:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_openai_gateway_returns_message_content() -> None:
    message = SimpleNamespace(content='{"story": "s"}')
    completions = _FakeCompletions(response=SimpleNamespace(choices=[SimpleNamespace(message=message)]))
    gw = OpenAIGateway(model="gpt-test", client=_fake_openai(completions), max_tokens=1000)

    assert gw.complete("p", timeout=5) == '{"story": "s"}'
    assert completions.kwargs["max_tokens"] == 1000
    assert completions.kwargs["timeout"] == 5
    assert completions.kwargs["messages"] == [{"role": "user", "content": "p"}]


def test_openai_status_error_maps_to_upstream() -> None:
    response = httpx.Response(429, text="rate limited", request=httpx.Request("POST", "https://api.test"))
    error = openai.APIStatusError("rate limited", response=response, body=None)
    gw = OpenAIGateway(model="gpt-test", client=_fake_openai(_FakeCompletions(error=error)))

    with pytest.raises(UpstreamError) as ei:
        gw.complete("p")
    assert ei.value.status == 429
    assert ei.value.body == "rate limited"


def test_openai_empty_content_is_malformed() -> None:
    completions = _FakeCompletions(response=SimpleNamespace(choices=[]))
    gw = OpenAIGateway(model="gpt-test", client=_fake_openai(completions))
    with pytest.raises(MalformedResponseError):
        gw.complete("p")


def test_build_gateway_selects_provider() -> None:
    gw = build_gateway(Settings(endpoint=ENDPOINT, model="m", api_key="k", max_tokens=10))
    assert isinstance(gw, MessagesGateway)
    assert gw.endpoint == ENDPOINT
    assert gw.max_tokens == 10

    gw = build_gateway(Settings(provider="openai", model="gpt-test", api_key="k"))
    assert isinstance(gw, OpenAIGateway)
    assert gw.model == "gpt-test"
