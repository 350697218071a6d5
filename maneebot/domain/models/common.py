"""Defines common Value Objects used across the bot.

These objects represent simple values like questions, answers and
message roles, ensuring consistency and type safety.
"""

from typing import NewType, Optional, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
Question = NewType("Question", str)      # Text supplied by the end user, compared byte-for-byte
Answer = NewType("Answer", str)          # Text produced by the provider or a fixed message
MessageRole = NewType("MessageRole", str)  # 'user', 'assistant', 'system'
CommandName = NewType("CommandName", str)

# === Token Management ===
class TokenUsage(TypedDict):
    """Represents token usage information from an AI call."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

# --- Fixed user-facing strings ---
NO_RESPONSE_ANSWER = Answer("No response from AI.")
MISSING_QUESTION_MESSAGE = "Please provide a question for Manee!"
PROVIDER_FAILURE_MESSAGE = "Error fetching response from AI. Please try again later."

def optional_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int]) -> Optional[TokenUsage]:
    """Builds a TokenUsage only when the provider reported all three counts."""
    if prompt is None or completion is None or total is None:
        return None
    return TokenUsage(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)
