"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging

import httpx

from chat_gateway.infrastructure.config import get_settings, resolve_api_key
from chat_gateway.infrastructure.openai_adapter import (
    OpenAIChatAdapter,
    build_http_client,
)
from chat_gateway.infrastructure.resilience import RetryPolicy
from chat_gateway.services.chat_completion import ChatCompletionUseCase

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None
_chat_adapter: OpenAIChatAdapter | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager.

    Raises :class:`ConfigurationError` when no API key is available, which
    aborts application startup.
    """
    global _http_client, _chat_adapter  # noqa: PLW0603

    settings = get_settings()
    api_key = resolve_api_key(settings)

    _http_client = build_http_client(
        settings.openai_base_url,
        api_key,
        timeout=settings.openai_timeout_seconds,
    )
    _chat_adapter = OpenAIChatAdapter(
        _http_client,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.openai_temperature,
        retry_policy=RetryPolicy(
            max_retries=settings.openai_max_retries,
            timeout=settings.openai_timeout_seconds,
        ),
    )

    logger.info("OpenAI base URL: %s", _http_client.base_url)
    logger.info("OpenAI model: %s", settings.openai_model)
    logger.info("OpenAI API key configured: %s", bool(api_key))


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _chat_adapter  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _chat_adapter = None


def get_use_case() -> ChatCompletionUseCase:
    """Build the use case around the shared adapter."""
    assert _chat_adapter is not None, "startup() was not called"
    return ChatCompletionUseCase(chat_model=_chat_adapter)
