"""Test doubles shared across the test suite."""

import httpx
from openai import RateLimitError

from maneebot.domain.models.ai import StructuredAIResponse


class FakeStatusError(Exception):
    """Provider error carrying an HTTP status, like the openai SDK errors."""

    def __init__(self, status_code: int, message: str = "provider failure"):
        super().__init__(message)
        self.status_code = status_code


def rate_limited(message: str = "Rate limit reached") -> FakeStatusError:
    return FakeStatusError(429, message)


def openai_rate_limit_error() -> RateLimitError:
    """A real openai.RateLimitError backed by an httpx 429 response."""
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, request=request)
    return RateLimitError("Rate limit reached for gpt-3.5-turbo", response=response, body=None)


def ai_response(content):
    return StructuredAIResponse(content=content)
