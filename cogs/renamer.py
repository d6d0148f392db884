import logging
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from utility.authorization import Status
from utility.config import VERSION
from utility.directory import add_role, fetch_invoker, has_role, remove_role
from utility.replies import reply
from utility.role_config import configure_role
from utility.role_store import RoleKind

logger = logging.getLogger(__name__)


@app_commands.guild_only()
class Renamer(commands.GroupCog, name="renamer", description="Opt in to renames and configure the bot."):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.store = bot.role_store
        self.resolver = bot.role_resolver
        self.gate = bot.gate

    admin = app_commands.Group(
        name="admin",
        description="Server setup for the renamer bot.",
    )

    @app_commands.command(name="help", description="Shows the renamer commands.")
    @app_commands.describe(command="Specific command to show help about")
    @app_commands.checks.cooldown(1, 5, key=lambda i: (i.user.id))
    async def help(self, interaction: discord.Interaction, command: Optional[str] = None):
        """Shows the renamer commands."""
        available = [
            cmd for cmd in self.bot.tree.walk_commands()
            if not isinstance(cmd, app_commands.Group)
        ]
        available.sort(key=lambda c: c.qualified_name)

        if command is not None:
            wanted = command.strip().lstrip("/")
            available = [c for c in available if wanted in (c.qualified_name, c.name)]
            if not available:
                await reply(interaction, f"No command called `{command}`.", ephemeral=True)
                return

        embed = discord.Embed(
            title="Help Desk",
            description=f"renamer version {VERSION}",
            color=discord.Color.blurple()
        )
        for cmd in available:
            embed.add_field(name=f"/{cmd.qualified_name}", value=cmd.description, inline=False)
        embed.set_footer(text="Type /renamer help <command> for more info on a command.")

        await reply(interaction, embed=embed, ephemeral=True)

    @app_commands.command(name="allow", description="Allow others to change your nickname.")
    @app_commands.checks.bot_has_permissions(manage_roles=True)
    async def allow(self, interaction: discord.Interaction):
        """Gives the invoker the configured Allow role."""
        member = await fetch_invoker(interaction)

        allow_role_id = await self.gate.resolve(interaction, RoleKind.ALLOW)
        if allow_role_id is None:
            return

        if not has_role(member, allow_role_id):
            await add_role(member, allow_role_id, reason="Opted in with /renamer allow")
            logger.info("%s allowed nickname changes in guild %s", member.id, interaction.guild.id)
            msg = "Successfully allowed nickname changes."
        else:
            msg = "You are already allowing nickname changes."

        await reply(interaction, msg, ephemeral=True)

    @app_commands.command(name="disallow", description="Stop others from changing your nickname.")
    @app_commands.checks.bot_has_permissions(manage_roles=True)
    async def disallow(self, interaction: discord.Interaction):
        """Takes the configured Allow role away from the invoker."""
        member = await fetch_invoker(interaction)

        allow_role_id = await self.gate.resolve(interaction, RoleKind.ALLOW)
        if allow_role_id is None:
            return

        if has_role(member, allow_role_id):
            await remove_role(member, allow_role_id, reason="Opted out with /renamer disallow")
            logger.info("%s disallowed nickname changes in guild %s", member.id, interaction.guild.id)
            msg = "Successfully disallowed nickname changes."
        else:
            msg = "You are already disallowing nickname changes."

        await reply(interaction, msg, ephemeral=True)

    @admin.command(name="set_roles", description="Set the roles used by the renamer bot.")
    @app_commands.checks.has_permissions(administrator=True)
    @app_commands.checks.bot_has_permissions(manage_roles=True)
    @app_commands.describe(
        renamer_role="Name of the role whose members may use /rename.",
        allow_role="Name of the role members get when they allow being renamed."
    )
    async def set_roles(self, interaction: discord.Interaction, renamer_role: str, allow_role: str):
        """Stores both role names for this server, creating the roles if they don't exist yet."""
        await interaction.response.defer(ephemeral=True)

        guild = interaction.guild
        renamer_msg = await configure_role(self.store, self.resolver, guild, RoleKind.RENAMER, renamer_role)
        allow_msg = await configure_role(self.store, self.resolver, guild, RoleKind.ALLOW, allow_role)

        embed = discord.Embed(title="set_roles", color=discord.Color.green())
        embed.add_field(name="Renamer role", value=renamer_msg, inline=False)
        embed.add_field(name="Allow role", value=allow_msg, inline=False)

        await reply(interaction, embed=embed, ephemeral=True)

    @admin.command(name="view_roles", description="View the roles currently configured for this server.")
    @app_commands.checks.has_permissions(administrator=True)
    async def view_roles(self, interaction: discord.Interaction):
        """Shows each configured role name and whether that role still exists."""
        await interaction.response.defer(ephemeral=True)

        embed = discord.Embed(
            title=f"⚙️ Roles for {interaction.guild.name}",
            color=discord.Color.blue()
        )
        for kind in RoleKind:
            result = await self.gate.check(kind, interaction.guild)
            if result.status is Status.NOT_CONFIGURED:
                value = "Not Set"
            elif result.status is Status.ROLE_MISSING:
                value = f"`{result.role_name}` (Not Found)"
            else:
                value = result.role.mention
            embed.add_field(name=f"{kind} role", value=value, inline=False)

        await reply(interaction, embed=embed, ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(Renamer(bot))
