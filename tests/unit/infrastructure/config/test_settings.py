import os
import pytest
from pathlib import Path

from maneebot.domain.exceptions import ConfigurationError
from maneebot.infrastructure.config import settings


@pytest.fixture
def no_credentials(monkeypatch):
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def test_defaults(monkeypatch):
    for var in ("OPENAI_MODEL", "OPENAI_MAX_TOKENS", "RETRY_MAX_RETRIES", "RETRY_INITIAL_BACKOFF_S",
                "RETRY_BACKOFF_FACTOR", "CACHE_MAX_ITEMS"):
        monkeypatch.delenv(var, raising=False)

    assert settings.get_model() == "gpt-3.5-turbo"
    assert settings.get_max_tokens() == 300
    assert settings.get_max_retries() == 3
    assert settings.get_initial_backoff() == 2.0
    assert settings.get_backoff_factor() == 2.0
    assert settings.get_cache_max_items() is None


def test_environment_overrides_and_coercion(monkeypatch):
    monkeypatch.setenv("RETRY_MAX_RETRIES", "5")
    monkeypatch.setenv("RETRY_INITIAL_BACKOFF_S", "0.5")
    monkeypatch.setenv("SOME_FLAG", "true")

    assert settings.get_config('retry.max_retries') == 5
    assert settings.get_initial_backoff() == 0.5
    assert settings.get_config('some.flag') is True


def test_test_config_has_highest_priority(monkeypatch):
    monkeypatch.setenv("RETRY_MAX_RETRIES", "5")
    settings.set_config_for_testing({'retry.max_retries': 1})

    assert settings.get_max_retries() == 1

    settings.clear_test_config()
    assert settings.get_max_retries() == 5


def test_yaml_nested_keys_are_resolved(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.delenv("CACHE_MAX_ITEMS", raising=False)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("openai:\n  model: gpt-4o-mini\ncache:\n  max_items: 250\n")
    monkeypatch.chdir(tmp_path)

    settings.load_configuration(config_file=config_file)

    assert settings.get_model() == "gpt-4o-mini"
    assert settings.get_cache_max_items() == 250


def test_dotenv_does_not_override_environment(tmp_path: Path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DISCORD_TOKEN=from-dotenv\nMANEEBOT_DOTENV_ONLY=loaded\n")
    monkeypatch.setenv("DISCORD_TOKEN", "from-environment")
    # Registers MANEEBOT_DOTENV_ONLY with monkeypatch so it is removed afterwards
    monkeypatch.setenv("MANEEBOT_DOTENV_ONLY", "placeholder")
    monkeypatch.delenv("MANEEBOT_DOTENV_ONLY")

    settings.load_configuration(config_file=tmp_path / "missing.yaml", env_file=env_file)

    assert settings.get_discord_token() == "from-environment"
    assert os.environ["MANEEBOT_DOTENV_ONLY"] == "loaded"


def test_require_credentials_lists_missing(no_credentials):
    with pytest.raises(ConfigurationError, match="DISCORD_TOKEN or OPENAI_API_KEY"):
        settings.require_credentials()


def test_require_credentials_console_only_needs_openai(no_credentials, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings.require_credentials(discord=False)

    with pytest.raises(ConfigurationError, match="DISCORD_TOKEN"):
        settings.require_credentials(discord=True)


def test_require_credentials_passes(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "discord-test")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings.require_credentials()


def test_credentials_are_read_verbatim(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "0123")
    monkeypatch.setenv("OPENAI_API_KEY", "1.50")

    assert settings.get_discord_token() == "0123"
    assert settings.get_openai_api_key() == "1.50"
    assert settings.get_config("DISCORD_TOKEN") == 123


def test_library_log_levels(monkeypatch):
    for var in ("LOGGING_DISCORD_LEVEL", "LOGGING_GATEWAY_LEVEL", "LOGGING_OPENAI_LEVEL", "LOGGING_HTTPX_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOGGING_DISCORD_LEVEL", "debug")
    settings.set_config_for_testing({'logging.openai_level': 'error'})

    assert settings.get_library_log_levels() == {'discord': 'DEBUG', 'openai': 'ERROR'}


def test_logging_defaults(monkeypatch):
    for var in ("LOGGING_LEVEL", "LOGGING_FILE", "LOGGING_FORMAT"):
        monkeypatch.delenv(var, raising=False)

    assert settings.get_log_level() == "INFO"
    assert settings.get_log_file() is None
    assert "%(levelname)s" in settings.get_log_format()
