import logging

import discord

from utility.directory import RoleResolver
from utility.role_store import RoleKind, RoleStore

logger = logging.getLogger(__name__)


async def configure_role(
    store: RoleStore,
    resolver: RoleResolver,
    guild: discord.Guild,
    kind: RoleKind,
    role_name: str,
) -> str:
    """
    Points ``kind`` at ``role_name`` for this guild and makes sure the role exists.

    Returns a two-line report: what happened to the stored setting, then whether
    an existing server role was reused or a new one created. Running it again
    with the same name changes nothing.
    """
    # Stored setting
    changed, previous = await store.update(kind, guild.id, role_name)
    if not changed:
        db_msg = f"{kind} role is already set to {role_name}; no change made."
    elif previous is not None:
        db_msg = f"{kind} role was changed from {previous} to {role_name}."
    else:
        db_msg = f"{kind} role was set to {role_name}."

    # Live server role
    role, created = await resolver.ensure(guild, role_name)
    if created:
        role_msg = f"Created new server role {role_name}."
    else:
        role_msg = f"Using existing server role {role_name}."

    logger.debug("Configured %s role %r (%s) in guild %s", kind, role_name, role.id, guild.id)
    return f"{db_msg}\n{role_msg}"
