"""Discord client for the /manee command.

Registers the command on every guild the bot is in and forwards each
invocation to the CommandHandler through a DiscordResponder.
"""

import logging
from typing import Any, Dict

import discord
from discord import app_commands

from maneebot.core.command_handler import (
    COMMAND_DESCRIPTION, COMMAND_NAME, QUESTION_DESCRIPTION, CommandHandler
)
from maneebot.domain.interfaces.responder import InteractionResponder
from maneebot.domain.models.common import CommandName
from maneebot.domain.models.interaction import CommandInvocation

logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000

def _fit(content: str) -> str:
    if len(content) <= DISCORD_MESSAGE_LIMIT:
        return content
    return content[:DISCORD_MESSAGE_LIMIT - 1] + "…"

class DiscordResponder(InteractionResponder):
    """Replies through a discord.Interaction."""

    def __init__(self, interaction: discord.Interaction):
        self.interaction = interaction

    async def reply(self, content: str) -> None:
        await self.interaction.response.send_message(_fit(content))

    async def defer(self) -> None:
        await self.interaction.response.defer()

    async def edit_reply(self, content: str) -> None:
        await self.interaction.edit_original_response(content=_fit(content))

def to_invocation(interaction: discord.Interaction, options: Dict[str, Any]) -> CommandInvocation:
    """Builds the platform-neutral view of an interaction."""
    command = interaction.command
    return CommandInvocation(
        command_name=CommandName(command.name) if command is not None else None,
        options=options,
        is_command=interaction.type == discord.InteractionType.application_command,
        guild_id=interaction.guild_id,
    )

def build_manee_command(handler: CommandHandler) -> app_commands.Command:
    """Creates the /manee slash command bound to a handler."""

    @app_commands.command(name=COMMAND_NAME, description=COMMAND_DESCRIPTION)
    @app_commands.describe(question=QUESTION_DESCRIPTION)
    async def manee(interaction: discord.Interaction, question: str) -> None:
        await handler.dispatch(to_invocation(interaction, {"question": question}), DiscordResponder(interaction))

    return manee

class ManeeBot(discord.Client):
    """discord.py client that serves the /manee command."""

    def __init__(self, handler: CommandHandler, **kwargs: Any):
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents, **kwargs)
        self.handler = handler
        self.tree = app_commands.CommandTree(self)
        self.tree.add_command(build_manee_command(handler))
        self._commands_registered = False

    async def register_commands(self, guild: discord.abc.Snowflake) -> bool:
        """Copies the global commands to a guild and syncs them."""
        logger.info(f"Registering commands for guild: {guild.id}")
        try:
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
        except discord.HTTPException as e:
            logger.error(f"Error registering commands for guild {guild.id}: {e}", exc_info=True)
            return False
        return True

    async def on_ready(self) -> None:
        # on_ready fires again after every gateway reconnect
        if self._commands_registered:
            logger.info(f"Reconnected as {self.user}")
            return
        self._commands_registered = True
        logger.info("Started refreshing application (/) commands.")
        results = [await self.register_commands(guild) for guild in self.guilds]
        logger.info(f"Reloaded application (/) commands for {sum(results)}/{len(results)} guilds.")
        logger.info(f"Logged in as {self.user}")

    async def on_guild_join(self, guild: discord.Guild) -> None:
        await self.register_commands(guild)

def run_bot(token: str, handler: CommandHandler) -> None:
    """Blocks running the bot until it is stopped."""
    bot = ManeeBot(handler)
    # log_handler=None keeps the logging configured by setup_logging
    bot.run(token, log_handler=None)
