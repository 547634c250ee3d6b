"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI

from chat_gateway.interface.dependencies import shutdown, startup
from chat_gateway.interface.error_handlers import register_error_handlers
from chat_gateway.interface.routes import router
from chat_gateway.interface.schemas import HealthResponse


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Chat Gateway",
        version="1.0.0",
        description=(
            "Forwards a text prompt to an OpenAI-compatible chat-completions "
            "API and returns the normalised completion."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        """Returns the current health status of the API."""
        return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))

    return app
