"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass

from chat_gateway.domain.exceptions import PromptValidationError

MAX_PROMPT_LENGTH = 4000


@dataclass(frozen=True, slots=True)
class Prompt:
    """Validated user prompt.

    Wraps the exact text supplied by the caller (no trimming).  Use
    :meth:`create` to build one; invalid text never produces an instance.
    """

    content: str

    @classmethod
    def create(cls, content: str | None) -> Prompt:
        """Validate raw text and wrap it."""
        if content is None or not content.strip():
            raise PromptValidationError(
                "Prompt content cannot be empty or whitespace."
            )
        if len(content) > MAX_PROMPT_LENGTH:
            raise PromptValidationError(
                f"Prompt content cannot exceed {MAX_PROMPT_LENGTH} characters."
            )
        return cls(content=content)

    def __str__(self) -> str:
        return self.content
