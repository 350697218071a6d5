import pytest
from unittest.mock import AsyncMock

from maneebot.core.command_handler import CommandHandler
from maneebot.domain.interfaces.ai_model import AIModel
from maneebot.domain.interfaces.responder import InteractionResponder
from maneebot.infrastructure.cache.caching_service import InMemoryAnswerCache
from maneebot.infrastructure.config import settings
from maneebot.infrastructure.resilience.api_retry import ApiRetryService

from tests.helpers import ai_response


@pytest.fixture(autouse=True)
def reset_settings():
    """Keeps configuration state from leaking between tests."""
    yield
    settings.clear_test_config()
    settings.reset_configuration()


@pytest.fixture
def mock_ai_model():
    mock = AsyncMock(spec=AIModel)
    mock.provider_name = "openai"
    mock.send_messages.return_value = ai_response("Mocked AI response")
    return mock


@pytest.fixture
def fake_sleep():
    """Records backoff waits instead of sleeping."""
    return AsyncMock(return_value=None)


@pytest.fixture
def retry_service(mock_ai_model, fake_sleep):
    return ApiRetryService(ai_model=mock_ai_model, max_retries=3, sleep=fake_sleep)


@pytest.fixture
def cache():
    return InMemoryAnswerCache()


@pytest.fixture
def command_handler(cache, retry_service):
    return CommandHandler(cache=cache, retry_service=retry_service)


@pytest.fixture
def mock_responder():
    return AsyncMock(spec=InteractionResponder)
