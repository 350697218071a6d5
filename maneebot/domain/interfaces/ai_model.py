"""Interface for AI Language Models (LLMs).

Defines the contract for sending a chat completion request to an AI
provider (e.g., OpenAI GPT).
"""

import abc
from typing import List

from ..models.ai import ChatMessage, StructuredAIResponse


class AIModel(abc.ABC):
    """Abstract Base Class for AI language model interactions."""

    provider_name: str = "unknown"

    @abc.abstractmethod
    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        """Sends a list of messages to the AI model asynchronously.

        Args:
            messages: A list of ChatMessage objects representing the conversation.

        Returns:
            A StructuredAIResponse containing the AI's reply and metadata.

        Raises:
            Exception: The provider SDK exception, unchanged. Callers classify
                it (rate limited or not).
        """
        pass
