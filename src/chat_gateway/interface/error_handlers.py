"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"error": "..."}`` envelope.  Provider failures get a fixed
public message; the details stay in the logs.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chat_gateway.domain.exceptions import (
    DomainValidationError,
    ProviderResponseError,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(
        request: Request, exc: DomainValidationError
    ) -> JSONResponse:
        logger.warning("Invalid prompt received: %s", exc)
        return error_json(400, str(exc))

    @app.exception_handler(ProviderUnavailableError)
    async def provider_unavailable_handler(
        request: Request, exc: ProviderUnavailableError
    ) -> JSONResponse:
        logger.error(
            "OpenAI API request failed (status=%s): %s", exc.status_code, exc
        )
        return error_json(503, SERVICE_UNAVAILABLE_MESSAGE)

    @app.exception_handler(ProviderResponseError)
    async def provider_response_handler(
        request: Request, exc: ProviderResponseError
    ) -> JSONResponse:
        logger.error("Unexpected error in chat endpoint: %s", exc)
        return error_json(500, UNEXPECTED_ERROR_MESSAGE)

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return error_json(400, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return error_json(500, UNEXPECTED_ERROR_MESSAGE)
