"""Command Handler: Orchestrates the /manee command.

`handle` turns an invocation into a ReplyPlan without touching the
platform. `dispatch` executes that plan against an InteractionResponder,
resolving deferred plans through the retry service and the answer cache.
"""

import logging
from typing import Optional

# Domain Layer Imports
from maneebot.domain.exceptions import ValidationError
from maneebot.domain.interfaces.cache import AnswerCache
from maneebot.domain.interfaces.responder import InteractionResponder
from maneebot.domain.models.common import (
    Answer, CommandName, MISSING_QUESTION_MESSAGE, PROVIDER_FAILURE_MESSAGE, Question
)
from maneebot.domain.models.interaction import (
    CommandInvocation, InvocationState, ReplyKind, ReplyPlan
)

# Infrastructure Layer Imports
from maneebot.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

COMMAND_NAME = CommandName("manee")
COMMAND_DESCRIPTION = "Ask Manee a question"
QUESTION_OPTION = "question"
QUESTION_DESCRIPTION = "The question you want to ask Manee"

class CommandHandler:
    """Handles /manee invocations."""

    def __init__(
        self,
        cache: AnswerCache,
        retry_service: ApiRetryService,
        max_retries: Optional[int] = None,
    ):
        """Initializes the CommandHandler.

        Args:
            cache: Store consulted before, and updated after, provider calls.
            retry_service: Performs the provider call with backoff.
            max_retries: Per-invocation retry budget (service default if None).
        """
        self.cache = cache
        self.retry_service = retry_service
        self.max_retries = max_retries

    def _extract_question(self, invocation: CommandInvocation) -> Question:
        question = invocation.options.get(QUESTION_OPTION)
        if not isinstance(question, str) or not question.strip():
            raise ValidationError("No question supplied.")
        # Kept verbatim: the cache key is the exact text
        return Question(question)

    def handle(self, invocation: CommandInvocation) -> ReplyPlan:
        """Decides how to reply to an invocation."""
        plan = ReplyPlan(kind=ReplyKind.IGNORE)
        if not invocation.is_command or invocation.command_name != COMMAND_NAME:
            logger.debug(f"Ignoring interaction (command={invocation.command_name!r}, is_command={invocation.is_command})")
            return plan

        logger.info(f"Interaction received in guild: {invocation.guild_id}")

        try:
            question = self._extract_question(invocation)
        except ValidationError:
            logger.info("Rejected /manee invocation without a question.")
            plan.kind = ReplyKind.IMMEDIATE
            plan.content = Answer(MISSING_QUESTION_MESSAGE)
            plan.advance(InvocationState.FAILED)
            return plan

        plan.question = question
        plan.advance(InvocationState.VALIDATED)

        cached = self.cache.get(question)
        if cached is not None:
            logger.info(f"Fetching answer from cache for: {question}")
            plan.kind = ReplyKind.IMMEDIATE
            plan.content = cached
            plan.advance(InvocationState.CACHE_HIT)
            return plan

        plan.kind = ReplyKind.DEFERRED
        plan.advance(InvocationState.PENDING)
        return plan

    async def resolve(self, plan: ReplyPlan) -> Answer:
        """Obtains the answer for a pending plan and records the outcome.

        Never raises for provider failures: the plan ends FAILED and the
        fixed failure message is returned instead.
        """
        if plan.kind is not ReplyKind.DEFERRED or plan.state is not InvocationState.PENDING or plan.question is None:
            raise ValueError(f"Only pending deferred plans can be resolved, got {plan.kind}/{plan.state}")

        try:
            answer = await self.retry_service.complete(plan.question, self.max_retries)
        except Exception as e:
            logger.error(f"Error communicating with {self.retry_service.provider_name}: {e}", exc_info=True)
            plan.content = Answer(PROVIDER_FAILURE_MESSAGE)
            plan.advance(InvocationState.FAILED)
            return plan.content

        self.cache.put(plan.question, answer)
        plan.content = answer
        plan.advance(InvocationState.ANSWERED)
        return answer

    async def dispatch(self, invocation: CommandInvocation, responder: InteractionResponder) -> ReplyPlan:
        """Handles an invocation end to end through the given responder."""
        plan = self.handle(invocation)

        if plan.kind is ReplyKind.IMMEDIATE:
            await responder.reply(plan.content or "")
        elif plan.kind is ReplyKind.DEFERRED:
            # Acknowledge before the slow provider call
            await responder.defer()
            answer = await self.resolve(plan)
            await responder.edit_reply(answer)

        return plan
