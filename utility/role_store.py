import asyncio
import enum
import logging
import os
from typing import Optional, Tuple

import aiosqlite

from utility.errors import EncodingError, StorageError

logger = logging.getLogger(__name__)


class RoleKind(enum.Enum):
    """What a configured role is used for."""

    RENAMER = "Renamer"  # members allowed to use /rename
    ALLOW = "Allow"  # members who opted in to being renamed

    def __str__(self) -> str:
        return self.value

    @property
    def table(self) -> str:
        return _TABLES[self]


# One table per kind, so a Renamer and an Allow entry for the same guild never collide.
_TABLES = {
    RoleKind.RENAMER: "renamer_roles",
    RoleKind.ALLOW: "allow_roles",
}


def guild_key(guild_id: int) -> bytes:
    """Fixed-width big-endian encoding of a guild id, used as the primary key."""
    return guild_id.to_bytes(8, "big")


def _encode_name(role_name: str) -> bytes:
    try:
        return role_name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Role name {role_name!r} cannot be stored: {e}") from e


def _decode_name(value: Optional[bytes]) -> Optional[str]:
    if value is None:
        return None
    return bytes(value).decode("utf-8")


class RoleStore:
    """
    Durable (kind, guild) -> role name mapping backed by SQLite.

    The connection is opened on first use (or explicitly with ``open``) and kept
    for the lifetime of the bot. Every call is atomic with respect to the other
    calls on the same store, and every write is committed before returning.
    """

    def __init__(self, path: str):
        self.path = path
        self._db: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        async with self._lock:
            await self._connection()

    async def close(self) -> None:
        async with self._lock:
            if self._db is not None:
                await self._db.close()
                self._db = None

    async def _connection(self) -> aiosqlite.Connection:
        # Callers must hold self._lock.
        if self._db is not None:
            return self._db

        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            db = await aiosqlite.connect(self.path)
        except (OSError, aiosqlite.Error) as e:
            raise StorageError(f"Could not open role database at {self.path}: {e}") from e

        try:
            for table in _TABLES.values():
                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        guild_key BLOB PRIMARY KEY,
                        role_name BLOB NOT NULL
                    )
                """)
            await db.commit()
        except aiosqlite.Error as e:
            await db.close()
            raise StorageError(f"Could not create role tables in {self.path}: {e}") from e

        logger.info("Opened role database at %s", self.path)
        self._db = db
        return db

    async def _read(self, db: aiosqlite.Connection, kind: RoleKind, key: bytes) -> Optional[str]:
        cursor = await db.execute(f"SELECT role_name FROM {kind.table} WHERE guild_key = ?", (key,))
        row = await cursor.fetchone()
        await cursor.close()
        return _decode_name(row[0]) if row else None

    async def _write(self, db: aiosqlite.Connection, kind: RoleKind, key: bytes, value: bytes) -> None:
        await db.execute(
            f"INSERT OR REPLACE INTO {kind.table} (guild_key, role_name) VALUES (?, ?)",
            (key, value),
        )
        await db.commit()

    async def get(self, kind: RoleKind, guild_id: int) -> Optional[str]:
        """Returns the role name stored for this guild, or None if it was never set."""
        key = guild_key(guild_id)
        async with self._lock:
            db = await self._connection()
            try:
                return await self._read(db, kind, key)
            except aiosqlite.Error as e:
                raise StorageError(f"Could not read {kind} role for guild {guild_id}: {e}") from e

    async def set(self, kind: RoleKind, guild_id: int, role_name: str) -> Optional[str]:
        """Stores role_name for this guild and returns whatever was stored before."""
        key = guild_key(guild_id)
        value = _encode_name(role_name)
        async with self._lock:
            db = await self._connection()
            try:
                previous = await self._read(db, kind, key)
                await self._write(db, kind, key, value)
            except aiosqlite.Error as e:
                raise StorageError(f"Could not store {kind} role for guild {guild_id}: {e}") from e

        logger.info("%s role for guild %s set to %r (was %r)", kind, guild_id, role_name, previous)
        return previous

    async def update(self, kind: RoleKind, guild_id: int, role_name: str) -> Tuple[bool, Optional[str]]:
        """
        Compare-and-set: writes role_name only if it differs from the stored value.

        Returns (changed, previous). The comparison and the write happen under one
        lock acquisition, so two admins configuring the same guild cannot lose
        each other's update between the read and the write.
        """
        key = guild_key(guild_id)
        value = _encode_name(role_name)
        async with self._lock:
            db = await self._connection()
            try:
                previous = await self._read(db, kind, key)
                if previous == role_name:
                    return False, previous
                await self._write(db, kind, key, value)
            except aiosqlite.Error as e:
                raise StorageError(f"Could not store {kind} role for guild {guild_id}: {e}") from e

        logger.info("%s role for guild %s set to %r (was %r)", kind, guild_id, role_name, previous)
        return True, previous
