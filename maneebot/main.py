"""Main entry point for maneebot.

Sets up the Typer CLI application, performs dependency injection
(Composition Root) and either starts the Discord bot or answers a single
question in the terminal.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from maneebot.core.command_handler import COMMAND_NAME, QUESTION_OPTION, CommandHandler

# --- Domain Layer ---
from maneebot.domain.exceptions import ConfigurationError
from maneebot.domain.models.common import CommandName
from maneebot.domain.models.interaction import CommandInvocation

# --- Infrastructure Layer ---
from maneebot.infrastructure.ai.openai.gpt_client import GptClient
from maneebot.infrastructure.cache.caching_service import InMemoryAnswerCache
from maneebot.infrastructure.cli.display import ConsoleDisplay
from maneebot.infrastructure.config.settings import (
    get_backoff_factor, get_cache_max_items, get_discord_token, get_initial_backoff,
    get_library_log_levels, get_log_file, get_log_format, get_log_level,
    get_max_retries, get_max_tokens, get_model, get_openai_api_key,
    load_configuration, require_credentials,
)
from maneebot.infrastructure.discord.bot import run_bot
from maneebot.infrastructure.monitoring.logger_setup import setup_logging
from maneebot.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies(require_discord: bool = True, max_retries: Optional[int] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.

    Args:
        require_discord: Fail when DISCORD_TOKEN is missing.
        max_retries: Retry budget for every /manee answer; the configured
            retry.max_retries when None.

    Raises:
        ConfigurationError: A required credential is missing.
    """
    # 1. Load Configuration First
    load_configuration()
    setup_logging(
        log_level=get_log_level(),
        log_format=get_log_format(),
        log_file=get_log_file(),
        library_levels=get_library_log_levels(),
    )
    require_credentials(discord=require_discord)
    logger.info("Configuration and logging initialized.")

    dependencies: Dict[str, Any] = {}

    # 2. Instantiate Infrastructure Adapters & Services
    dependencies['cache'] = InMemoryAnswerCache(max_items=get_cache_max_items())
    dependencies['ai_model'] = GptClient(
        api_key=get_openai_api_key(),
        model=get_model(),
        max_tokens=get_max_tokens(),
    )
    dependencies['api_retry_service'] = ApiRetryService(
        ai_model=dependencies['ai_model'],
        max_retries=get_max_retries(),
        initial_backoff_s=get_initial_backoff(),
        backoff_factor=get_backoff_factor(),
    )

    # 3. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        cache=dependencies['cache'],
        retry_service=dependencies['api_retry_service'],
        max_retries=max_retries,
    )
    dependencies['discord_token'] = get_discord_token()

    logger.info("All dependencies initialized successfully.")
    return dependencies

# --- Typer App Definition ---
app = typer.Typer(
    name="maneebot",
    help="Manee: a Discord /manee bot that answers questions with OpenAI.",
    add_completion=False,
)

def _create_or_exit(ui: ConsoleDisplay, **options: Any) -> Dict[str, Any]:
    try:
        return create_dependencies(**options)
    except ConfigurationError as e:
        logger.error(f"Fatal Error during application initialization: {e}")
        ui.display_error(str(e))
        raise typer.Exit(code=1)

# --- CLI Commands ---

@app.command()
def run() -> None:
    """Start the Discord bot and serve /manee."""
    ui = ConsoleDisplay()
    dependencies = _create_or_exit(ui, require_discord=True)
    logger.info("Starting Discord client...")
    run_bot(dependencies['discord_token'], dependencies['command_handler'])

@app.command()
def ask(
    question: Annotated[str, typer.Argument(help="The question you want to ask Manee.")],
    retries: Annotated[Optional[int], typer.Option("--retries", "-r", min=0, help="Retry budget when rate limited.")] = None,
) -> None:
    """Ask Manee one question from the terminal."""
    ui = ConsoleDisplay()
    dependencies = _create_or_exit(ui, require_discord=False, max_retries=retries)
    handler: CommandHandler = dependencies['command_handler']

    invocation = CommandInvocation(
        command_name=CommandName(COMMAND_NAME),
        options={QUESTION_OPTION: question},
    )
    asyncio.run(handler.dispatch(invocation, ui))

# --- Main Execution Guard ---

def cli_entry_point() -> None:
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
