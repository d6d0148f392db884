import logging

import discord
from discord.ext import commands
from discord import app_commands

from utility.config import MEMBER_SEARCH_LIMIT
from utility.directory import edit_nickname, fetch_invoker, has_role, search_members
from utility.replies import reply
from utility.role_store import RoleKind
from utility.validation import is_valid_nickname

logger = logging.getLogger(__name__)


class Rename(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.gate = bot.gate

    @app_commands.command(name="rename", description="Change another member's nickname.")
    @app_commands.guild_only()
    @app_commands.checks.bot_has_permissions(manage_nicknames=True)
    @app_commands.describe(
        username="Start of the member's username or nickname.",
        nickname="The new nickname (1-32 characters)."
    )
    async def rename(self, interaction: discord.Interaction, username: str, nickname: str):
        """Sets the nickname of exactly one matching member. Requires the configured Renamer role."""
        member = await fetch_invoker(interaction)

        renamer_role_id = await self.gate.resolve(interaction, RoleKind.RENAMER)
        if renamer_role_id is None:
            return

        if not has_role(member, renamer_role_id):
            await reply(interaction, "You do not have permission to use this command.", ephemeral=True)
            return

        if not is_valid_nickname(nickname):
            await reply(interaction, f"{nickname} is not a valid nickname.", ephemeral=True)
            return

        targets = await search_members(interaction.guild, username, MEMBER_SEARCH_LIMIT)
        if not targets:
            await reply(interaction, f"Search for '{username}' found no users.", ephemeral=True)
            return
        if len(targets) > 1:
            await reply(
                interaction,
                f"Search for '{username}' found too many users. Specify exactly one user for `username`.",
                ephemeral=True
            )
            return

        target = targets[0]
        await edit_nickname(target, nickname, reason=f"/rename by {member.name}")

        logger.info("%s renamed %s to %r in guild %s", member.id, target.id, nickname, interaction.guild.id)
        await reply(interaction, f"{member.name} set {target.name}'s nickname to {nickname}.", ephemeral=False)


async def setup(bot: commands.Bot):
    await bot.add_cog(Rename(bot))
