"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chat_gateway.domain.entities import ChatOutput


class ChatRequest(BaseModel):
    """Request body for ``POST /chat/openai``.

    ``prompt`` is optional here so a missing value gets the same
    ``"Prompt is required"`` answer as a blank one.
    """

    prompt: str | None = None


class ChatResponse(BaseModel):
    """Successful response from ``POST /chat/openai`` (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    content: str
    model: str
    tokens_used: int
    created_at: datetime

    @classmethod
    def from_output(cls, output: ChatOutput) -> ChatResponse:
        return cls(
            content=output.content,
            model=output.model,
            tokens_used=output.tokens_used,
            created_at=output.created_at,
        )


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: str = "healthy"
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    error: str
