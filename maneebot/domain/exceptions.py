"""Exception hierarchy for maneebot.

Provider-path errors (RateLimitExceeded, ProviderError) are caught at the
command handler boundary and never shown to the end user.
"""

from typing import Optional


class ManeeBotError(Exception):
    """Base class for all maneebot errors."""


class ConfigurationError(ManeeBotError):
    """A required credential or setting is missing. Fatal at startup."""


class ValidationError(ManeeBotError):
    """The invocation carried no usable question."""


class ProviderError(ManeeBotError):
    """The language-model provider failed for a reason other than rate limiting."""


class RateLimitExceeded(ManeeBotError):
    """The provider kept signalling rate limiting until the retry budget ran out."""

    def __init__(self, attempts: int, last_exception: Optional[Exception] = None):
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(f"Rate limit exceeded after {attempts} attempts. Try again later.")
