"""Concrete implementation of the AIModel interface using the OpenAI API.

Hides the specifics of the OpenAI client library and translates requests/
responses between the domain model and the OpenAI API format.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

from openai import OpenAI, RateLimitError, APIError, AuthenticationError

# Domain Layer Imports
from maneebot.domain.exceptions import ConfigurationError, ProviderError
from maneebot.domain.interfaces.ai_model import AIModel
from maneebot.domain.models.ai import ChatMessage, StructuredAIResponse
from maneebot.domain.models.common import optional_usage

logger = logging.getLogger(__name__)

class GptClient(AIModel):
    """OpenAI implementation of the AIModel interface."""

    DEFAULT_MODEL = "gpt-3.5-turbo"
    DEFAULT_MAX_TOKENS = 300
    provider_name = "openai"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, max_tokens: Optional[int] = None):
        """Initializes the OpenAI client.

        Args:
            api_key: OpenAI API key.
            model: The chat-completion model to use.
            max_tokens: Upper bound on completion tokens per answer.
        """
        if not api_key:
            raise ConfigurationError("OpenAI API key not provided.")

        self.client = OpenAI(api_key=api_key)
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        logger.info(f"GptClient initialized for model: {self.model} (max_tokens={self.max_tokens})")

    def _parse_openai_response(self, response: Any) -> StructuredAIResponse:
        """Parses the response object from an OpenAI chat completion."""
        try:
            choices = response.choices or []
            content = choices[0].message.content if choices else None

            token_usage = None
            if response.usage:
                token_usage = optional_usage(
                    response.usage.prompt_tokens,
                    response.usage.completion_tokens,
                    response.usage.total_tokens,
                )

            return StructuredAIResponse(
                content=content,
                token_usage=token_usage,
                model_name=response.model,
            )
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse OpenAI response structure: {e}", exc_info=True)
            logger.debug(f"Raw OpenAI response object: {response}")
            raise ProviderError(f"Invalid response structure from OpenAI: {e}") from e

    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        """Sends messages to the configured OpenAI model asynchronously."""
        logger.debug(f"Sending {len(messages)} messages to OpenAI model: {self.model}")
        start_time = time.perf_counter()
        try:
            # The SDK call blocks, so it runs off the event loop
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
            )
        except AuthenticationError as e:
            logger.error(f"OpenAI Authentication Error: {e}")
            raise
        except RateLimitError as e:
            logger.warning(f"OpenAI Rate Limit Error encountered: {e}")
            raise
        except APIError as e:
            logger.warning(f"OpenAI API Error encountered: {e}")
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        structured_response = self._parse_openai_response(response)
        structured_response.latency_ms = latency_ms

        logger.debug(f"Received response from OpenAI in {latency_ms:.2f}ms. Usage: {structured_response.token_usage}")
        return structured_response
