import pytest

from utility.role_config import configure_role
from utility.role_store import RoleKind


@pytest.mark.asyncio
async def test_first_configuration_creates_role(store, resolver, guild):
    msg = await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    assert msg == "Renamer role was set to Mods.\nCreated new server role Mods."
    assert await store.get(RoleKind.RENAMER, guild.id) == "Mods"
    assert [r["name"] for r in guild.created_roles] == ["Mods"]


@pytest.mark.asyncio
async def test_existing_role_is_reused(store, resolver, guild):
    guild.add_role("Renameable")
    msg = await configure_role(store, resolver, guild, RoleKind.ALLOW, "Renameable")
    assert msg == "Allow role was set to Renameable.\nUsing existing server role Renameable."
    assert guild.created_roles == []


@pytest.mark.asyncio
async def test_reconfiguring_is_idempotent(store, resolver, guild):
    await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    msg = await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    assert msg == "Renamer role is already set to Mods; no change made.\nUsing existing server role Mods."
    assert len(guild.created_roles) == 1


@pytest.mark.asyncio
async def test_changing_the_role_reports_previous_name(store, resolver, guild):
    await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    msg = await configure_role(store, resolver, guild, RoleKind.RENAMER, "Admins")
    assert msg == "Renamer role was changed from Mods to Admins.\nCreated new server role Admins."


@pytest.mark.asyncio
async def test_deleted_role_is_recreated(store, resolver, guild):
    await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    guild.delete_role("Mods")
    msg = await configure_role(store, resolver, guild, RoleKind.RENAMER, "Mods")
    assert msg.endswith("Created new server role Mods.")
    assert len(guild.created_roles) == 2
