"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from chat_gateway.domain.exceptions import ChatOutputValidationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ChatOutput:
    """A completion produced by a chat model, stamped when it was built."""

    content: str
    model: str
    tokens_used: int
    created_at: datetime = field(init=False, default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.content, str) or not self.content.strip():
            raise ChatOutputValidationError("Chat output content cannot be empty.")
        if not isinstance(self.model, str) or not self.model.strip():
            raise ChatOutputValidationError("Model name cannot be empty.")
        if isinstance(self.tokens_used, bool) or not isinstance(self.tokens_used, int):
            raise ChatOutputValidationError("Tokens used must be an integer.")
        if self.tokens_used < 0:
            raise ChatOutputValidationError("Tokens used cannot be negative.")
