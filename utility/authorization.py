import enum
import logging
from typing import NamedTuple, Optional

import discord

from utility.directory import RoleResolver
from utility.replies import reply
from utility.role_store import RoleKind, RoleStore

logger = logging.getLogger(__name__)

SETUP_HINT = "Have an admin set up the app with /renamer admin set_roles."


class Status(enum.Enum):
    NOT_CONFIGURED = "not_configured"
    ROLE_MISSING = "role_missing"
    RESOLVED = "resolved"


class Resolution(NamedTuple):
    status: Status
    role_name: Optional[str] = None
    role: Optional[discord.Role] = None


def diagnostic(kind: RoleKind, status: Status) -> str:
    """User-facing explanation for a failed resolution."""
    if status is Status.NOT_CONFIGURED:
        return f"{kind} role not known for this server. {SETUP_HINT}"
    if status is Status.ROLE_MISSING:
        return f"{kind} role does not exist in this server. {SETUP_HINT}"
    raise ValueError(f"No diagnostic for {status}")


class AuthorizationGate:
    """
    Answers "is this kind of role set up here, and which live role is it?".

    The stored name is looked up against the guild's current roles on every
    call; a stored name whose role has been deleted or renamed resolves to
    ROLE_MISSING rather than to a stale id.
    """

    def __init__(self, store: RoleStore, resolver: RoleResolver):
        self.store = store
        self.resolver = resolver

    async def check(self, kind: RoleKind, guild: discord.Guild) -> Resolution:
        role_name = await self.store.get(kind, guild.id)
        if role_name is None:
            return Resolution(Status.NOT_CONFIGURED)

        role = await self.resolver.find_by_name(guild, role_name)
        if role is None:
            return Resolution(Status.ROLE_MISSING, role_name)

        return Resolution(Status.RESOLVED, role_name, role)

    async def resolve(self, interaction: discord.Interaction, kind: RoleKind) -> Optional[int]:
        """
        Returns the live role id for ``kind`` in the interaction's guild.

        When the role cannot be resolved the invoker has already been told why
        (ephemerally) and None is returned; the caller should just stop.
        """
        result = await self.check(kind, interaction.guild)
        if result.status is Status.RESOLVED:
            return result.role.id

        logger.info("%s role unresolved in guild %s: %s", kind, interaction.guild.id, result.status.value)
        await reply(interaction, diagnostic(kind, result.status), ephemeral=True)
        return None
