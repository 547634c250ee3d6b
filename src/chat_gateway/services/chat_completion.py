"""Chat-completion use case — validates input and delegates to the model port.

Depends only on :class:`ChatModelPort`; the interface layer injects the
concrete adapter at runtime.
"""

from __future__ import annotations

import logging

from chat_gateway.domain.entities import ChatOutput
from chat_gateway.domain.exceptions import PromptValidationError
from chat_gateway.domain.ports.chat_model import ChatModelPort
from chat_gateway.domain.value_objects import Prompt


class ChatCompletionUseCase:
    """Run one prompt through the configured chat model.

    Failures from the port are logged and re-raised unchanged.
    """

    def __init__(
        self,
        chat_model: ChatModelPort,
        logger: logging.Logger | None = None,
    ) -> None:
        self._chat_model = chat_model
        self._logger = logger or logging.getLogger(__name__)

    async def execute(self, prompt: Prompt | None) -> ChatOutput:
        if prompt is None:
            raise PromptValidationError("Prompt is required")

        self._logger.info(
            "Executing chat use case with prompt length: %d", len(prompt.content)
        )

        try:
            output = await self._chat_model.complete(prompt)
        except Exception:
            self._logger.exception("Error executing chat use case")
            raise

        self._logger.info(
            "Chat use case completed successfully. Model: %s, Tokens: %d",
            output.model,
            output.tokens_used,
        )
        return output
