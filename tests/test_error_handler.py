import pytest
from discord import app_commands

from bot import GENERIC_ERROR, on_app_command_error
from cogs.rename import Rename
from fakes import FakeInteraction
from utility.errors import DirectoryError, IdentityUnavailable, StorageError


@pytest.mark.asyncio
@pytest.mark.parametrize("cause", [
    StorageError("disk full"),
    DirectoryError("403 Forbidden"),
    IdentityUnavailable("user left the server"),
])
async def test_renamer_errors_get_one_generic_reply(guild, cause):
    interaction = FakeInteraction(guild, guild.add_member("alice"))
    error = app_commands.CommandInvokeError(Rename.rename, cause)

    await on_app_command_error(interaction, error)

    assert interaction.only_reply == {"content": GENERIC_ERROR, "embed": None, "ephemeral": True}


@pytest.mark.asyncio
async def test_error_after_defer_uses_followup(guild):
    interaction = FakeInteraction(guild, guild.add_member("admin"))
    await interaction.response.defer(ephemeral=True)

    await on_app_command_error(interaction, app_commands.CommandInvokeError(Rename.rename, StorageError("locked")))

    assert interaction.only_reply["content"] == GENERIC_ERROR


@pytest.mark.asyncio
async def test_missing_permissions(guild):
    interaction = FakeInteraction(guild, guild.add_member("alice"))

    await on_app_command_error(interaction, app_commands.MissingPermissions(["administrator"]))

    assert interaction.only_reply["content"] == "You don't have permission to use this command."


@pytest.mark.asyncio
async def test_bot_missing_permissions(guild):
    interaction = FakeInteraction(guild, guild.add_member("alice"))

    await on_app_command_error(interaction, app_commands.BotMissingPermissions(["manage_nicknames"]))

    assert interaction.only_reply["content"] == "I don't have the necessary permissions to execute this command."


@pytest.mark.asyncio
async def test_unexpected_exception_gets_generic_reply(guild):
    interaction = FakeInteraction(guild, guild.add_member("alice"))

    await on_app_command_error(interaction, app_commands.CommandInvokeError(Rename.rename, KeyError("x")))

    assert interaction.only_reply["content"] == GENERIC_ERROR


@pytest.mark.asyncio
async def test_no_private_message(guild):
    interaction = FakeInteraction(None, guild.add_member("alice"))

    await on_app_command_error(interaction, app_commands.NoPrivateMessage())

    assert interaction.only_reply == {
        "content": "This command can only be used in a server.",
        "embed": None,
        "ephemeral": True,
    }


@pytest.mark.asyncio
async def test_command_on_cooldown(guild):
    interaction = FakeInteraction(guild, guild.add_member("alice"))
    error = app_commands.CommandOnCooldown(app_commands.Cooldown(1, 5.0), 3.5)

    await on_app_command_error(interaction, error)

    assert interaction.only_reply["content"] == "This command is on cooldown. Try again in 3.50 seconds."
    assert interaction.only_reply["ephemeral"]
