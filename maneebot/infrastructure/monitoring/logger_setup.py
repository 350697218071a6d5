"""Logging configuration for the bot process.

Everything logs through the root logger: maneebot's own modules, and the
discord.py, openai and httpx libraries underneath them. The libraries
are noisy at INFO (gateway heartbeats, every HTTP request), so each gets
its own level on top of the root one.
"""

import logging
import sys
from typing import Dict, List, Mapping, Optional, Union

LevelLike = Union[int, str]

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Library loggers and the level each starts at
DEFAULT_LIBRARY_LEVELS: Dict[str, LevelLike] = {
    'discord': logging.INFO,
    'discord.gateway': logging.WARNING,
    'discord.http': logging.WARNING,
    'openai': logging.WARNING,
    'httpx': logging.WARNING,
}

def to_level(value: LevelLike, default: int = DEFAULT_LOG_LEVEL) -> int:
    """Turns 'debug', 'WARNING', 10 etc. into a logging level number."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default

def setup_logging(
    log_level: LevelLike = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
    library_levels: Optional[Mapping[str, LevelLike]] = None,
) -> Dict[str, int]:
    """Configures the root logger and the library loggers.

    Args:
        log_level: Root level for maneebot's own records.
        log_format: The format string for log messages.
        log_file: Optional path to a file receiving the same records.
        library_levels: Overrides for DEFAULT_LIBRARY_LEVELS, keyed by
            logger name. Names not listed there are accepted too.

    Returns:
        The level applied to each library logger.
    """
    root_level = to_level(log_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}", exc_info=True)

    # Handlers stay at NOTSET so a library set below the root level still prints
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    applied: Dict[str, int] = {}
    for name, level in {**DEFAULT_LIBRARY_LEVELS, **(library_levels or {})}.items():
        applied[name] = to_level(level, default=root_level)
        logging.getLogger(name).setLevel(applied[name])

    file_note = f", file={log_file}" if len(handlers) > 1 else ""
    logging.info(f"Logging configured. Level={logging.getLevelName(root_level)}{file_note}")
    level_names = {name: logging.getLevelName(level) for name, level in applied.items()}
    logging.debug(f"Library log levels: {level_names}")
    return applied
