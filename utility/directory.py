"""
Live lookups against the Discord API: guild roles and members.

Nothing here is cached. Roles can be renamed or deleted at any moment by the
server's admins, so every check goes back to the API and matches by name.
"""
import asyncio
import logging
from typing import Dict, List, Optional, Tuple

import discord

from utility.config import clamp_search_limit
from utility.errors import DirectoryError, IdentityUnavailable

logger = logging.getLogger(__name__)


class RoleResolver:
    """Finds guild roles by exact name and creates them when missing."""

    def __init__(self):
        # One lock per guild so two set_roles calls cannot both create the same role.
        # Kept for the life of the process; at most one entry per guild the bot is in.
        self._create_locks: Dict[int, asyncio.Lock] = {}

    async def find_by_name(self, guild: discord.Guild, name: str) -> Optional[discord.Role]:
        """Returns the first role of the guild whose name is exactly ``name``."""
        try:
            roles = await guild.fetch_roles()
        except discord.HTTPException as e:
            raise DirectoryError(f"Could not fetch roles for guild {guild.id}: {e}") from e

        return discord.utils.get(roles, name=name)

    async def ensure(self, guild: discord.Guild, name: str) -> Tuple[discord.Role, bool]:
        """
        Returns (role, created). An existing role with that name is reused;
        otherwise a new non-mentionable role is created.
        """
        lock = self._create_locks.setdefault(guild.id, asyncio.Lock())
        async with lock:
            role = await self.find_by_name(guild, name)
            if role is not None:
                return role, False

            try:
                role = await guild.create_role(
                    name=name,
                    mentionable=False,
                    reason="Configured with /renamer admin set_roles",
                )
            except discord.HTTPException as e:
                raise DirectoryError(f"Could not create role {name!r} in guild {guild.id}: {e}") from e

        logger.info("Created role %r (%s) in guild %s", name, role.id, guild.id)
        return role, True


async def fetch_invoker(interaction: discord.Interaction) -> discord.Member:
    """Fetches a fresh Member object for whoever invoked the command."""
    if interaction.guild is None:
        raise IdentityUnavailable("Command was not invoked inside a server.")

    try:
        return await interaction.guild.fetch_member(interaction.user.id)
    except discord.NotFound as e:
        raise IdentityUnavailable(f"User {interaction.user.id} is not a member of guild {interaction.guild.id}.") from e
    except discord.HTTPException as e:
        raise DirectoryError(f"Could not fetch member {interaction.user.id}: {e}") from e


def has_role(member: discord.Member, role_id: int) -> bool:
    return member.get_role(role_id) is not None


async def search_members(guild: discord.Guild, query: str, limit: int) -> List[discord.Member]:
    """Members whose username or nickname starts with ``query``."""
    limit = clamp_search_limit(limit)
    try:
        return await guild.query_members(query=query, limit=limit)
    except asyncio.TimeoutError as e:
        raise DirectoryError(f"Member search for {query!r} timed out.") from e
    except discord.HTTPException as e:
        raise DirectoryError(f"Member search for {query!r} failed: {e}") from e


async def edit_nickname(member: discord.Member, nickname: str, reason: Optional[str] = None) -> None:
    try:
        await member.edit(nick=nickname, reason=reason)
    except discord.HTTPException as e:
        raise DirectoryError(f"Could not change nickname of {member.id}: {e}") from e


async def add_role(member: discord.Member, role_id: int, reason: Optional[str] = None) -> None:
    try:
        await member.add_roles(discord.Object(id=role_id), reason=reason)
    except discord.HTTPException as e:
        raise DirectoryError(f"Could not give role {role_id} to {member.id}: {e}") from e


async def remove_role(member: discord.Member, role_id: int, reason: Optional[str] = None) -> None:
    try:
        await member.remove_roles(discord.Object(id=role_id), reason=reason)
    except discord.HTTPException as e:
        raise DirectoryError(f"Could not take role {role_id} from {member.id}: {e}") from e
