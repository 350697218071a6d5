import pytest
from unittest.mock import AsyncMock, MagicMock, PropertyMock

import discord

from maneebot.core.command_handler import CommandHandler, QUESTION_DESCRIPTION
from maneebot.infrastructure.discord.bot import (
    DISCORD_MESSAGE_LIMIT, DiscordResponder, ManeeBot, build_manee_command, to_invocation
)


@pytest.fixture
def mock_interaction():
    interaction = MagicMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    interaction.command.name = "manee"
    interaction.type = discord.InteractionType.application_command
    interaction.guild_id = 42
    return interaction


@pytest.fixture
def mock_handler():
    return MagicMock(spec=CommandHandler)


@pytest.mark.asyncio
async def test_responder_maps_to_interaction_calls(mock_interaction):
    responder = DiscordResponder(mock_interaction)

    await responder.reply("cached")
    await responder.defer()
    await responder.edit_reply("4")

    mock_interaction.response.send_message.assert_awaited_once_with("cached")
    mock_interaction.response.defer.assert_awaited_once_with()
    mock_interaction.edit_original_response.assert_awaited_once_with(content="4")


@pytest.mark.asyncio
async def test_responder_truncates_long_replies(mock_interaction):
    await DiscordResponder(mock_interaction).edit_reply("x" * 5000)

    sent = mock_interaction.edit_original_response.call_args.kwargs['content']
    assert len(sent) == DISCORD_MESSAGE_LIMIT


def test_to_invocation(mock_interaction):
    invocation = to_invocation(mock_interaction, {"question": "What is 2+2?"})

    assert invocation.command_name == "manee"
    assert invocation.options == {"question": "What is 2+2?"}
    assert invocation.is_command is True
    assert invocation.guild_id == 42


def test_to_invocation_for_component_interaction(mock_interaction):
    mock_interaction.type = discord.InteractionType.component
    mock_interaction.command = None

    invocation = to_invocation(mock_interaction, {})

    assert invocation.is_command is False
    assert invocation.command_name is None


def test_manee_command_definition(mock_handler):
    command = build_manee_command(mock_handler)

    assert command.name == "manee"
    assert command.description == "Ask Manee a question"
    [param] = command.parameters
    assert param.name == "question"
    assert param.required is True
    assert param.description == QUESTION_DESCRIPTION


@pytest.mark.asyncio
async def test_manee_command_dispatches_to_handler(mock_handler, mock_interaction):
    command = build_manee_command(mock_handler)

    await command.callback(mock_interaction, "What is 2+2?")

    mock_handler.dispatch.assert_awaited_once()
    invocation, responder = mock_handler.dispatch.await_args.args
    assert invocation.options == {"question": "What is 2+2?"}
    assert isinstance(responder, DiscordResponder)
    assert responder.interaction is mock_interaction


@pytest.mark.asyncio
async def test_register_commands_syncs_guild(mock_handler, mocker):
    bot = ManeeBot(mock_handler)
    copy_global_to = mocker.patch.object(bot.tree, "copy_global_to")
    sync = mocker.patch.object(bot.tree, "sync", new=AsyncMock(return_value=[]))
    guild = MagicMock(id=99)

    assert await bot.register_commands(guild) is True

    copy_global_to.assert_called_once_with(guild=guild)
    sync.assert_awaited_once_with(guild=guild)
    assert bot.tree.get_command("manee") is not None


@pytest.mark.asyncio
async def test_register_commands_failure_is_logged_not_raised(mock_handler, mocker):
    bot = ManeeBot(mock_handler)
    mocker.patch.object(bot.tree, "copy_global_to")
    error = discord.HTTPException(MagicMock(status=403, reason="Forbidden"), "Missing Access")
    mocker.patch.object(bot.tree, "sync", new=AsyncMock(side_effect=error))

    assert await bot.register_commands(MagicMock(id=7)) is False


@pytest.mark.asyncio
async def test_on_ready_registers_each_guild_once_across_reconnects(mock_handler, mocker):
    bot = ManeeBot(mock_handler)
    guilds = [MagicMock(id=1), MagicMock(id=2)]
    mocker.patch.object(ManeeBot, "guilds", new_callable=PropertyMock, return_value=guilds)
    register = mocker.patch.object(bot, "register_commands", new=AsyncMock(return_value=True))

    await bot.on_ready()
    await bot.on_ready()

    assert [c.args[0] for c in register.await_args_list] == guilds


@pytest.mark.asyncio
async def test_on_guild_join_registers_new_guild(mock_handler, mocker):
    bot = ManeeBot(mock_handler)
    register = mocker.patch.object(bot, "register_commands", new=AsyncMock(return_value=True))
    guild = MagicMock(id=3)

    await bot.on_guild_join(guild)

    register.assert_awaited_once_with(guild)
