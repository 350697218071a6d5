"""Domain models for one slash-command invocation and its reply plan.

A `CommandInvocation` is the platform-neutral view of an inbound
interaction. The `CommandHandler` turns it into a `ReplyPlan` which a
platform binding (Discord, the console) then executes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .common import Answer, CommandName, Question


class InvocationState(str, Enum):
    """Lifecycle of a single invocation."""
    RECEIVED = "received"
    VALIDATED = "validated"
    CACHE_HIT = "cache_hit"
    PENDING = "pending"
    ANSWERED = "answered"
    FAILED = "failed"


class ReplyKind(str, Enum):
    """How the binding must reply."""
    IGNORE = "ignore"        # no reply at all
    IMMEDIATE = "immediate"  # single direct reply
    DEFERRED = "deferred"    # acknowledge now, edit the reply later


@dataclass
class CommandInvocation:
    """An inbound interaction as seen by the handler."""
    command_name: Optional[CommandName]
    options: Dict[str, Any] = field(default_factory=dict)
    is_command: bool = True
    guild_id: Optional[int] = None


@dataclass
class ReplyPlan:
    """What the handler decided to do with an invocation.

    For IMMEDIATE plans `content` is the reply text. For DEFERRED plans
    `question` holds the validated question and `content` is filled in
    once the handler resolves the answer. `history` lists every state the
    invocation has been in, the current one last.
    """
    kind: ReplyKind
    state: InvocationState = InvocationState.RECEIVED
    content: Optional[Answer] = None
    question: Optional[Question] = None
    history: List[InvocationState] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.state)

    def advance(self, state: InvocationState) -> None:
        self.state = state
        self.history.append(state)
