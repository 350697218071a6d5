"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and an optional
YAML configuration file (~/.maneebot/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from maneebot.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".maneebot"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 300
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF_S = 2.0
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Library logger -> config key holding its level
LIBRARY_LOG_LEVEL_KEYS = {
    'discord': 'logging.discord_level',
    'discord.gateway': 'logging.gateway_level',
    'openai': 'logging.openai_level',
    'httpx': 'logging.httpx_level',
}

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env found).")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.info("Configuration loading process completed.")

def reset_configuration() -> None:
    """Forgets loaded YAML values so the next load_configuration reloads."""
    global _config, _loaded
    _config = {}
    _loaded = False

def _coerce(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value

def _lookup_yaml(key: str) -> Any:
    """Resolves a key as a flat entry first, then as a dotted path."""
    if key in _config:
        return _config[key]
    node: Any = _config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node

def get_config(key: str, default: Any = None, coerce: bool = True) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration
    2. Environment variable (key upper-cased, dots replaced by underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'retry.max_retries'
        default: Default value if the key is not found
        coerce: Convert environment strings to bool/int/float. Secrets
            are read with coerce=False so "0123" stays "0123".

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace('.', '_')
    if env_key in os.environ:
        raw = os.environ[env_key]
        return _coerce(raw) if coerce else raw

    value = _lookup_yaml(key)
    if value is not None:
        return value

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_discord_token() -> Optional[str]:
    """Gets the Discord bot token (DISCORD_TOKEN or discord.token)."""
    token = get_config('DISCORD_TOKEN', coerce=False) or get_config('discord.token', coerce=False)
    return str(token) if token else None

def get_openai_api_key() -> Optional[str]:
    """Gets the OpenAI API key (OPENAI_API_KEY or openai.api_key)."""
    key = get_config('OPENAI_API_KEY', coerce=False) or get_config('openai.api_key', coerce=False)
    return str(key) if key else None

def get_model() -> str:
    return str(get_config('openai.model', DEFAULT_MODEL))

def get_max_tokens() -> int:
    return int(get_config('openai.max_tokens', DEFAULT_MAX_TOKENS))

def get_max_retries() -> int:
    return int(get_config('retry.max_retries', DEFAULT_MAX_RETRIES))

def get_initial_backoff() -> float:
    return float(get_config('retry.initial_backoff_s', DEFAULT_INITIAL_BACKOFF_S))

def get_backoff_factor() -> float:
    return float(get_config('retry.backoff_factor', DEFAULT_BACKOFF_FACTOR))

def get_cache_max_items() -> Optional[int]:
    """Optional bound for the answer cache; None keeps it unbounded."""
    value = get_config('cache.max_items')
    return int(value) if value else None

def get_log_level() -> str:
    return str(get_config('logging.level', DEFAULT_LOG_LEVEL)).upper()

def get_log_format() -> str:
    return str(get_config('logging.format', DEFAULT_LOG_FORMAT))

def get_log_file() -> Optional[str]:
    value = get_config('logging.file', coerce=False)
    return str(value) if value else None

def get_library_log_levels() -> Dict[str, str]:
    """Levels set for library loggers, e.g. logging.discord_level: DEBUG."""
    levels = {}
    for logger_name, key in LIBRARY_LOG_LEVEL_KEYS.items():
        value = get_config(key)
        if value:
            levels[logger_name] = str(value).upper()
    return levels

def require_credentials(discord: bool = True) -> None:
    """Fails fast when a required credential is absent.

    Args:
        discord: Whether the Discord token is required as well as the
            OpenAI key (False for console-only use).

    Raises:
        ConfigurationError: Naming every missing variable.
    """
    missing = []
    if discord and not get_discord_token():
        missing.append("DISCORD_TOKEN")
    if not get_openai_api_key():
        missing.append("OPENAI_API_KEY")
    if missing:
        raise ConfigurationError(f"Missing environment variables: {' or '.join(missing)}")

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
