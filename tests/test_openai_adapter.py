"""Tests for the OpenAI chat adapter against a mocked transport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from chat_gateway.domain.exceptions import (
    ChatOutputValidationError,
    ProviderResponseError,
    ProviderUnavailableError,
    ResponseDecodeError,
)
from chat_gateway.domain.value_objects import Prompt
from chat_gateway.infrastructure.openai_adapter import (
    OpenAIChatAdapter,
    build_http_client,
)
from chat_gateway.infrastructure.resilience import RetryPolicy

SUCCESS_BODY: dict[str, Any] = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1677652288,
    "model": "gpt-4o-mini",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "Paris is the capital of France.",
            },
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 10, "completion_tokens": 15, "total_tokens": 25},
}


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _make_adapter(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    sleep: _RecordingSleep | None = None,
    base_url: str = "https://api.openai.com/v1",
    model: str = "gpt-4o-mini",
) -> OpenAIChatAdapter:
    client = build_http_client(
        base_url, "sk-test", transport=httpx.MockTransport(handler)
    )
    return OpenAIChatAdapter(
        client,
        model=model,
        max_tokens=256,
        temperature=0.2,
        retry_policy=RetryPolicy(sleep=sleep or _RecordingSleep()),
    )


def _json_handler(body: Any, status: int = 200):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=body)

    return handler, requests


@pytest.mark.asyncio
async def test_successful_response_is_parsed() -> None:
    handler, requests = _json_handler(SUCCESS_BODY)
    adapter = _make_adapter(handler)

    result = await adapter.complete(Prompt.create("What is the capital of France?"))

    assert result.content == "Paris is the capital of France."
    assert result.model == "gpt-4o-mini"
    assert result.tokens_used == 25
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_request_shape_and_authorization() -> None:
    handler, requests = _json_handler(SUCCESS_BODY)
    adapter = _make_adapter(handler, base_url="https://llm.example.test/v1/")

    await adapter.complete(Prompt.create("Hello there"))

    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://llm.example.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert json.loads(request.content) == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "Hello there"}],
        "max_tokens": 256,
        "temperature": 0.2,
    }


@pytest.mark.asyncio
async def test_empty_choices_is_structural_error() -> None:
    handler, _ = _json_handler({**SUCCESS_BODY, "choices": []})
    adapter = _make_adapter(handler)

    with pytest.raises(ProviderResponseError, match="does not contain any choices") as info:
        await adapter.complete(Prompt.create("hi"))
    assert not isinstance(info.value, ResponseDecodeError)


@pytest.mark.asyncio
async def test_missing_choices_is_structural_error() -> None:
    body = {k: v for k, v in SUCCESS_BODY.items() if k != "choices"}
    handler, _ = _json_handler(body)

    with pytest.raises(ProviderResponseError, match="choices"):
        await _make_adapter(handler).complete(Prompt.create("hi"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "choice",
    [{"index": 0}, {"index": 0, "message": {"role": "assistant"}}],
)
async def test_missing_message_content_is_structural_error(choice: dict[str, Any]) -> None:
    handler, _ = _json_handler({**SUCCESS_BODY, "choices": [choice]})

    with pytest.raises(ProviderResponseError, match="message content"):
        await _make_adapter(handler).complete(Prompt.create("hi"))


@pytest.mark.asyncio
async def test_missing_usage_defaults_tokens_to_zero() -> None:
    body = {k: v for k, v in SUCCESS_BODY.items() if k != "usage"}
    handler, _ = _json_handler(body)

    result = await _make_adapter(handler).complete(Prompt.create("hi"))

    assert result.tokens_used == 0


@pytest.mark.asyncio
async def test_missing_model_falls_back_to_configured_model() -> None:
    body = {k: v for k, v in SUCCESS_BODY.items() if k != "model"}
    handler, _ = _json_handler(body)

    result = await _make_adapter(handler, model="my-deployment").complete(
        Prompt.create("hi")
    )

    assert result.model == "my-deployment"


@pytest.mark.asyncio
async def test_null_content_fails_output_validation() -> None:
    choice = {"index": 0, "message": {"role": "assistant", "content": None}}
    handler, _ = _json_handler({**SUCCESS_BODY, "choices": [choice]})

    with pytest.raises(ChatOutputValidationError):
        await _make_adapter(handler).complete(Prompt.create("hi"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [42, [{"type": "text", "text": "Paris"}], {"text": "Paris"}],
)
async def test_non_string_content_is_structural_error(content: Any) -> None:
    choice = {"index": 0, "message": {"role": "assistant", "content": content}}
    handler, _ = _json_handler({**SUCCESS_BODY, "choices": [choice]})

    with pytest.raises(ProviderResponseError, match="content is not a string"):
        await _make_adapter(handler).complete(Prompt.create("hi"))


@pytest.mark.asyncio
@pytest.mark.parametrize("model", [123, ["gpt-4o-mini"], True])
async def test_non_string_model_is_structural_error(model: Any) -> None:
    handler, _ = _json_handler({**SUCCESS_BODY, "model": model})

    with pytest.raises(ProviderResponseError, match="model is not a string"):
        await _make_adapter(handler).complete(Prompt.create("hi"))


@pytest.mark.asyncio
async def test_null_model_falls_back_to_configured_model() -> None:
    handler, _ = _json_handler({**SUCCESS_BODY, "model": None})

    result = await _make_adapter(handler, model="my-deployment").complete(
        Prompt.create("hi")
    )

    assert result.model == "my-deployment"


@pytest.mark.asyncio
async def test_malformed_json_is_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(ResponseDecodeError) as info:
        await _make_adapter(handler).complete(Prompt.create("hi"))

    assert isinstance(info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_structurally_invalid_success_is_not_retried() -> None:
    handler, requests = _json_handler({"choices": []})
    sleep = _RecordingSleep()

    with pytest.raises(ProviderResponseError):
        await _make_adapter(handler, sleep=sleep).complete(Prompt.create("hi"))

    assert len(requests) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [429, 500, 503])
async def test_transient_failures_exhaust_retries(status: int) -> None:
    error_body = {"error": {"message": "Rate limit exceeded", "type": "rate_limit_error"}}
    handler, requests = _json_handler(error_body, status=status)
    sleep = _RecordingSleep()

    with pytest.raises(ProviderUnavailableError) as info:
        await _make_adapter(handler, sleep=sleep).complete(Prompt.create("hi"))

    assert len(requests) == 4
    assert sleep.delays == [2.0, 4.0, 8.0]
    assert info.value.status_code == status
    assert "Rate limit exceeded" in (info.value.body or "")


@pytest.mark.asyncio
async def test_unauthorized_fails_without_retry() -> None:
    error_body = {"error": {"message": "Invalid API key", "code": "invalid_api_key"}}
    handler, requests = _json_handler(error_body, status=401)

    with pytest.raises(ProviderUnavailableError) as info:
        await _make_adapter(handler).complete(Prompt.create("hi"))

    assert info.value.status_code == 401
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_network_failure_becomes_provider_unavailable() -> None:
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderUnavailableError) as info:
        await _make_adapter(handler).complete(Prompt.create("hi"))

    assert attempts == 4
    assert info.value.status_code is None
    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_build_http_client_normalises_base_url() -> None:
    client = build_http_client("https://api.openai.com/v1//", "sk-abc")

    assert str(client.base_url) == "https://api.openai.com/v1/"
    assert client.headers["Authorization"] == "Bearer sk-abc"
