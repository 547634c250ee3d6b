"""OpenAI adapter — implements the ChatModelPort over the chat-completions REST API."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import httpx

from chat_gateway.domain.entities import ChatOutput
from chat_gateway.domain.exceptions import (
    ProviderResponseError,
    ProviderUnavailableError,
    ResponseDecodeError,
)
from chat_gateway.domain.value_objects import Prompt
from chat_gateway.infrastructure.resilience import RetryPolicy

_COMPLETIONS_PATH = "chat/completions"


def build_http_client(
    base_url: str,
    api_key: str,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared client: normalised base URL plus bearer auth."""
    return httpx.AsyncClient(
        transport=transport,
        base_url=f"{base_url.rstrip('/')}/",
        headers={
            "Authorization": f"Bearer {api_key}",
            "User-Agent": "chat-gateway/1.0",
        },
        timeout=httpx.Timeout(timeout),
    )


class OpenAIChatAdapter:
    """Concrete ``ChatModelPort`` backed by ``POST {base_url}/chat/completions``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        model: str = "gpt-4o-mini",
        max_tokens: int = 256,
        temperature: float = 0.2,
        retry_policy: RetryPolicy | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._retry_policy = retry_policy or RetryPolicy()
        self._logger = logger or logging.getLogger(__name__)

    async def complete(self, prompt: Prompt) -> ChatOutput:
        """Send *prompt* as a single user message and parse the completion."""
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt.content}],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        url = self._client.base_url.join(_COMPLETIONS_PATH)

        self._logger.debug(
            "Sending request to OpenAI - URL: %s, Model: %s, MaxTokens: %d, Temperature: %s",
            url,
            self._model,
            self._max_tokens,
            self._temperature,
        )

        started = time.perf_counter()
        try:
            resp = await self._retry_policy.execute(
                lambda: self._client.post(_COMPLETIONS_PATH, json=payload)
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "HTTP request to OpenAI failed after %dms",
                _elapsed_ms(started),
                exc_info=exc,
            )
            raise ProviderUnavailableError(
                f"Network error calling {url}: {exc!r}"
            ) from exc

        self._logger.info(
            "OpenAI API response - Status: %d, Latency: %dms",
            resp.status_code,
            _elapsed_ms(started),
        )

        if not resp.is_success:
            self._logger.error(
                "OpenAI API error - Status: %d, URL: %s, Error: %s",
                resp.status_code,
                url,
                resp.text,
            )
            raise ProviderUnavailableError(
                f"OpenAI API returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            return self._parse_response(resp.text)
        except ProviderResponseError as exc:
            self._logger.error("Unusable OpenAI response: %s", exc, exc_info=exc)
            raise

    def _parse_response(self, body: str) -> ChatOutput:
        """Extract content, model and token usage from a completion body."""
        try:
            root = json.loads(body)
        except ValueError as exc:
            raise ResponseDecodeError("Failed to parse OpenAI response.") from exc

        choices = root.get("choices") if isinstance(root, dict) else None
        if not isinstance(choices, list) or not choices:
            raise ProviderResponseError(
                "OpenAI response does not contain any choices."
            )

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict) or "content" not in message:
            raise ProviderResponseError(
                "OpenAI response choice does not contain message content."
            )

        content = message["content"]
        if content is None:
            content = ""
        elif not isinstance(content, str):
            raise ProviderResponseError(
                f"OpenAI message content is not a string: {type(content).__name__}"
            )

        model = root.get("model")
        if model is not None and not isinstance(model, str):
            raise ProviderResponseError(
                f"OpenAI response model is not a string: {model!r}"
            )
        model = model or self._model

        tokens_used = 0
        usage = root.get("usage")
        if isinstance(usage, dict) and "total_tokens" in usage:
            total = usage["total_tokens"]
            if isinstance(total, bool) or not isinstance(total, int):
                raise ResponseDecodeError(
                    f"usage.total_tokens is not an integer: {total!r}"
                )
            tokens_used = total

        return ChatOutput(content=content, model=model, tokens_used=tokens_used)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
