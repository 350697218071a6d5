"""Service for executing completion requests with automatic retries.

Implements bounded exponential backoff for rate-limit failures (HTTP 429).
Every other failure is terminal on the first attempt.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from openai import RateLimitError

# Domain Layer Imports
from maneebot.domain.events.api_events import (
    ApiCallFailed, ApiCallInitiated, ApiCallSucceeded, DomainEvent, RetryScheduled
)
from maneebot.domain.exceptions import ProviderError, RateLimitExceeded
from maneebot.domain.interfaces.ai_model import AIModel
from maneebot.domain.models.ai import ChatMessage
from maneebot.domain.models.common import Answer, MessageRole, NO_RESPONSE_ANSWER, Question

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429

SleepFunc = Callable[[float], Awaitable[None]]
EventListener = Callable[[DomainEvent], None]

def is_rate_limited(error: BaseException) -> bool:
    """True when the provider signalled throttling (HTTP 429)."""
    if isinstance(error, RateLimitError):
        return True
    return getattr(error, "status_code", None) == RATE_LIMIT_STATUS

# --- Retry Service ---

class ApiRetryService:
    """Wraps a single completion request with bounded backoff on rate limits."""

    def __init__(
        self,
        ai_model: AIModel,
        max_retries: int = 3,
        initial_backoff_s: float = 2.0,
        backoff_factor: float = 2.0,
        sleep: SleepFunc = asyncio.sleep,
        event_listener: Optional[EventListener] = None,
    ):
        """Initializes the ApiRetryService.

        Args:
            ai_model: The provider client that performs one request.
            max_retries: Default retry budget per logical request.
            initial_backoff_s: Delay before the first retry.
            backoff_factor: Multiplier applied to the delay after each retry.
            sleep: Awaitable sleep used between attempts. Tests inject a
                recorder here instead of waiting for real.
            event_listener: Optional callback receiving every domain event.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.ai_model = ai_model
        self.max_retries = max_retries
        self.initial_backoff_s = initial_backoff_s
        self.backoff_factor = backoff_factor
        self._sleep = sleep
        self._event_listener = event_listener
        self.provider_name = getattr(ai_model, "provider_name", type(ai_model).__name__)

        logger.info(
            f"ApiRetryService initialized: max_retries={max_retries}, "
            f"initial_backoff={initial_backoff_s}s, factor={backoff_factor}, "
            f"provider='{self.provider_name}'"
        )

    def backoff_schedule(self, max_retries: Optional[int] = None) -> List[float]:
        """The waits a fully rate-limited request goes through, in order."""
        budget = self.max_retries if max_retries is None else max_retries
        return [self.initial_backoff_s * self.backoff_factor ** i for i in range(budget)]

    def _dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._event_listener is not None:
            self._event_listener(event)

    async def complete(self, question: Question, max_retries: Optional[int] = None) -> Answer:
        """Asks the provider one question, retrying while it is rate limited.

        Args:
            question: Sent verbatim as the single user message.
            max_retries: Retry budget for this request (service default if None).

        Returns:
            The first choice's text, or NO_RESPONSE_ANSWER when empty.

        Raises:
            RateLimitExceeded: The budget ran out while still rate limited.
            ProviderError: Any other failure, raised without retrying.
        """
        budget = self.max_retries if max_retries is None else max_retries
        if budget < 0:
            raise ValueError("max_retries must be >= 0")
        delays = self.backoff_schedule(budget)

        messages: List[ChatMessage] = [{'role': MessageRole('user'), 'content': question}]
        endpoint = "chat.completions"
        attempt = 0

        while True:
            attempt += 1
            self._dispatch_event(ApiCallInitiated(provider=self.provider_name, endpoint=endpoint, attempt_number=attempt))
            start_time = time.perf_counter()
            try:
                response = await self.ai_model.send_messages(messages)
            except Exception as e:
                if not is_rate_limited(e):
                    logger.error(f"Non-retryable error calling {self.provider_name}.{endpoint} on attempt {attempt}: {e}", exc_info=True)
                    self._dispatch_event(ApiCallFailed(provider=self.provider_name, endpoint=endpoint, error_type=type(e).__name__, error_message=str(e)))
                    if isinstance(e, ProviderError):
                        raise
                    raise ProviderError(f"{self.provider_name} request failed: {e}") from e

                if attempt > len(delays):
                    logger.error(f"Max retries reached for {self.provider_name}.{endpoint} after {attempt} attempts. Last error: {e}")
                    self._dispatch_event(ApiCallFailed(provider=self.provider_name, endpoint=endpoint, error_type=type(e).__name__, error_message=str(e)))
                    raise RateLimitExceeded(attempts=attempt, last_exception=e) from e

                delay = delays[attempt - 1]
                logger.warning(f"Rate limit hit, retrying after {delay:g} seconds (attempt {attempt}, {len(delays) - attempt + 1} retries left)")
                self._dispatch_event(RetryScheduled(provider=self.provider_name, endpoint=endpoint, attempt_number=attempt, delay_seconds=delay))
                await self._sleep(delay)
                continue

            latency_ms = (time.perf_counter() - start_time) * 1000
            self._dispatch_event(ApiCallSucceeded(provider=self.provider_name, endpoint=endpoint, latency_ms=latency_ms, response_summary=response.token_usage))
            return Answer(response.content) if response.content else NO_RESPONSE_ANSWER
