"""SQLite implementation of the key-value store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from vly_player.application.interfaces.key_value_store import KeyValueStore
from vly_player.domain.shared.constants import DatabaseTables
from vly_player.domain.shared.datetime_utils import iso_timestamp
from vly_player.domain.shared.exceptions import PersistenceError
from vly_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore(KeyValueStore):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, key: str) -> str | None:
        try:
            row = await self._db.fetch_one(
                f"SELECT value FROM {DatabaseTables.KV_STORE} WHERE key = ?",  # noqa: S608
                (key,),
            )
        except aiosqlite.Error as e:
            raise PersistenceError(key, f"Failed to read '{key}': {e}") from e

        if row is None:
            logger.debug(LogTemplates.KV_MISSING, key)
            return None
        value = row["value"]
        logger.debug(LogTemplates.KV_LOADED, key, len(value))
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._db.execute(
                f"""
                INSERT INTO {DatabaseTables.KV_STORE} (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,  # noqa: S608
                (key, value, iso_timestamp()),
            )
        except aiosqlite.Error as e:
            raise PersistenceError(key, f"Failed to write '{key}': {e}") from e
        logger.debug(LogTemplates.KV_SAVED, key, len(value))

    async def delete(self, key: str) -> bool:
        try:
            deleted = await self._db.execute(
                f"DELETE FROM {DatabaseTables.KV_STORE} WHERE key = ?",  # noqa: S608
                (key,),
            )
        except aiosqlite.Error as e:
            raise PersistenceError(key, f"Failed to delete '{key}': {e}") from e
        return deleted > 0


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
