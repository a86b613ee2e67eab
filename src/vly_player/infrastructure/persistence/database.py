"""aiosqlite access for the key-value table.

Every statement opens its own connection in WAL mode. In-memory databases use
a uniquely named shared-cache URI plus one pinned connection so that the data
outlives the per-statement connections.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from vly_player.domain.shared.constants import DatabaseTables, SQLPragmas
from vly_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

_SQLITE_PREFIX = "sqlite:///"
_MEMORY = ":memory:"

_KV_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {DatabaseTables.KV_STORE} (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f','now'))
)
"""


class Database:
    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        self._db_path = url.removeprefix(_SQLITE_PREFIX)
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

        self._initialized = False
        self._pinned: aiosqlite.Connection | None = None
        self._shared_name = f"vly-player-{uuid4().hex}"

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_memory(self) -> bool:
        return self._db_path == _MEMORY

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Create the schema; safe to call more than once."""
        if self._initialized:
            return

        if self.is_memory:
            if self._pinned is None:
                self._pinned = await self._connect()
            await self._pinned.execute(_KV_SCHEMA)
            await self._pinned.commit()
        else:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            async with self.transaction() as conn:
                await conn.execute(_KV_SCHEMA)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _connect(self) -> aiosqlite.Connection:
        if self.is_memory:
            target, uri = f"file:{self._shared_name}?mode=memory&cache=shared", True
        else:
            target, uri = self._db_path, False

        conn = await aiosqlite.connect(target, uri=uri, timeout=self._connection_timeout)
        conn.row_factory = aiosqlite.Row
        for pragma in (
            SQLPragmas.JOURNAL_MODE_WAL,
            SQLPragmas.SYNCHRONOUS_NORMAL,
            SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout),
        ):
            await conn.execute(pragma)
        return conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Yield a fresh connection, committing on success and rolling back on error."""
        conn = await self._connect()
        try:
            yield conn
            await conn.commit()
        except Exception:
            try:
                await conn.rollback()
            except aiosqlite.Error:
                logger.debug("Rollback failed", exc_info=True)
            raise
        finally:
            await conn.close()

    async def execute(self, sql: str, parameters: tuple[Any, ...] = ()) -> int:
        """Run one write statement and return the affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            return cursor.rowcount

    async def fetch_one(self, sql: str, parameters: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        rows = await self.fetch_all(sql, parameters)
        return rows[0] if rows else None

    async def fetch_all(self, sql: str, parameters: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            return [dict(row) for row in await cursor.fetchall()]

    async def close(self) -> None:
        """Drop the pinned in-memory connection, discarding its data."""
        pinned, self._pinned = self._pinned, None
        if pinned is not None:
            await pinned.close()
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)
