"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class ChatGatewayError(Exception):
    """Base exception for the entire application."""


# ── Validation ──────────────────────────────────────────────────────────────


class DomainValidationError(ChatGatewayError, ValueError):
    """A domain value was constructed from invalid arguments (400)."""


class PromptValidationError(DomainValidationError):
    """The prompt text is empty, whitespace-only or too long."""


class ChatOutputValidationError(DomainValidationError):
    """A chat output was built from empty content/model or negative tokens."""


# ── Provider errors ─────────────────────────────────────────────────────────


class ProviderUnavailableError(ChatGatewayError):
    """The provider could not be reached or answered with a failure status (503)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProviderResponseError(ChatGatewayError):
    """A successful provider response lacks the expected structure (500)."""


class ResponseDecodeError(ProviderResponseError):
    """The provider response body is not valid JSON."""


# ── Startup ─────────────────────────────────────────────────────────────────


class ConfigurationError(ChatGatewayError):
    """Required configuration is missing; the service must not start."""
