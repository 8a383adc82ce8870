"""IdentityStore — aiosqlite key-value persistence for the push identity."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from chatpush.config import settings
from chatpush.identity.models import (
    DEVICE_TOKEN_KEY,
    REGISTRATION_ID_KEY,
    PushIdentity,
    make_registration_id,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS push_identity (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class IdentityStore:
    """Persists the registration id and the last device token in SQLite.

    Singleton accessed via ``IdentityStore.get()``.  Pass an explicit *db_path*
    for test isolation (e.g. ``tmp_path / "test.db"``).

    Every write is committed before the call returns, so a registration id
    handed out once survives a crash immediately afterwards.
    """

    _instance: IdentityStore | None = None

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or settings.database_path
        self._initialised = False

    @classmethod
    def get(cls) -> IdentityStore:
        """Return the shared IdentityStore instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    # -- Internal helpers ------------------------------------------------------

    async def _connect(self) -> aiosqlite.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(self._db_path))
        if not self._initialised:
            await db.execute(_CREATE_TABLE)
            await db.commit()
            self._initialised = True
        return db

    async def _read(self, key: str) -> str | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT value FROM push_identity WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
            return row[0] if row else None
        finally:
            await db.close()

    async def _write(self, key: str, value: str) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO push_identity (key, value) VALUES (?, ?)",
                (key, value),
            )
            await db.commit()
        finally:
            await db.close()

    # -- Public API ------------------------------------------------------------

    async def get_or_create_registration_id(self) -> str:
        """Return the stored registration id, creating and persisting one if absent."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT value FROM push_identity WHERE key = ?", (REGISTRATION_ID_KEY,)
            )
            row = await cursor.fetchone()
            if row:
                return row[0]

            registration_id = make_registration_id()
            # OR IGNORE keeps the first id if another writer got there first
            await db.execute(
                "INSERT OR IGNORE INTO push_identity (key, value) VALUES (?, ?)",
                (REGISTRATION_ID_KEY, registration_id),
            )
            await db.commit()

            cursor = await db.execute(
                "SELECT value FROM push_identity WHERE key = ?", (REGISTRATION_ID_KEY,)
            )
            row = await cursor.fetchone()
            logger.info("Created push registration id %s", row[0])
            return row[0]
        finally:
            await db.close()

    async def get_device_token(self) -> str | None:
        """Return the last recorded device token, or None if never recorded."""
        return await self._read(DEVICE_TOKEN_KEY)

    async def set_device_token(self, token: str) -> None:
        """Record a token delivered by the platform. Raises ValueError if empty."""
        if not token:
            msg = "Device token must not be empty"
            raise ValueError(msg)
        await self._write(DEVICE_TOKEN_KEY, token)
        logger.info("Recorded device token (prefix=%s)", token[:8])

    async def get_identity(self) -> PushIdentity:
        """Return the full identity, creating the registration id if needed."""
        registration_id = await self.get_or_create_registration_id()
        return PushIdentity(
            registration_id=registration_id,
            device_token=await self.get_device_token(),
        )
