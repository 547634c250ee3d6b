"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chat_gateway.domain.exceptions import PromptValidationError
from chat_gateway.domain.value_objects import Prompt
from chat_gateway.interface.dependencies import get_use_case
from chat_gateway.interface.error_handlers import error_json
from chat_gateway.interface.schemas import ChatRequest, ChatResponse, ErrorResponse
from chat_gateway.services.chat_completion import ChatCompletionUseCase

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")

_DISCONNECT_POLL_SECONDS = 0.25


class ClientDisconnected(Exception):
    """The caller went away before the completion finished."""


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await *work*, cancelling it if the client disconnects first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                raise ClientDisconnected
    finally:
        if not task.done():
            task.cancel()


@router.post(
    "/chat/openai",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid prompt"},
        500: {"model": ErrorResponse, "description": "Unexpected error"},
        503: {"model": ErrorResponse, "description": "LLM provider unavailable"},
    },
)
async def chat_with_openai(
    body: ChatRequest,
    request: Request,
    use_case: ChatCompletionUseCase = Depends(get_use_case),
) -> ChatResponse | JSONResponse:
    """Send a prompt to the configured OpenAI model."""
    if body.prompt is None or not body.prompt.strip():
        raise PromptValidationError("Prompt is required")

    prompt = Prompt.create(body.prompt)
    try:
        result = await _cancel_on_disconnect(request, use_case.execute(prompt))
    except ClientDisconnected:
        logger.info("Client disconnected; provider call cancelled")
        return error_json(499, "Client closed request")

    return ChatResponse.from_output(result)
