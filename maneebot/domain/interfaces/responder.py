"""Interface for replying to an invocation.

Platform bindings (Discord, the console) implement this so the command
handler can execute a ReplyPlan without knowing where it is running.
"""

import abc


class InteractionResponder(abc.ABC):
    """Abstract Base Class for the reply channel of one invocation."""

    @abc.abstractmethod
    async def reply(self, content: str) -> None:
        """Sends a direct, non-deferred reply."""
        pass

    @abc.abstractmethod
    async def defer(self) -> None:
        """Acknowledges the invocation; the substantive reply follows later."""
        pass

    @abc.abstractmethod
    async def edit_reply(self, content: str) -> None:
        """Delivers the substantive reply through the deferred channel."""
        pass
