"""Port: chat model — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from chat_gateway.domain.entities import ChatOutput
from chat_gateway.domain.value_objects import Prompt


class ChatModelPort(Protocol):
    """Abstract contract for obtaining a completion from a chat model.

    Calls are cancelled by cancelling the awaiting task; implementations
    must let :class:`asyncio.CancelledError` propagate.
    """

    async def complete(self, prompt: Prompt) -> ChatOutput:
        """Send *prompt* to the model and return its completion."""
        ...
