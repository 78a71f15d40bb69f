"""
Connection pool for the snapshot store.

The daily batches read prior snapshots in bulk before computing and write
all rows in one bulk upsert afterwards; the API only reads single
snapshots. The wrapper exposes exactly those access patterns over an
asyncpg pool.
"""

import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from arc_scoring.config.settings import get_settings

logger = logging.getLogger(__name__)


class Database:
    """
    asyncpg pool holding the authority, Smart Followers and mindshare snapshots.

    Usage:
        db = Database()
        await db.connect()
        rows = await db.fetch("SELECT ... WHERE as_of_date = $1", as_of)
        await db.close()
    """

    def __init__(
        self,
        database_url: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
    ):
        settings = get_settings()

        self._database_url = database_url or str(settings.database_url)
        self._min_size = min_size or settings.db_pool_min_size
        self._max_size = max_size or settings.db_pool_max_size

        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Open the pool. Connection failures propagate to the caller."""
        try:
            self._pool = await asyncpg.create_pool(
                self._database_url,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=60,
            )
        except Exception as e:
            logger.error("Failed to connect to snapshot store: %s", e)
            raise
        logger.info("Snapshot store connected (pool: %d-%d)", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Snapshot store connection closed")

    @property
    def pool(self) -> asyncpg.Pool:
        """The open pool; raises RuntimeError before connect()."""
        if self._pool is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Connection with an open transaction, committed on clean exit."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement (DDL at startup); returns the status string."""
        return await self.pool.execute(query, *args)

    async def executemany(self, query: str, args: Iterable[Sequence[Any]]) -> None:
        """
        Run an upsert once per parameter tuple, all in one transaction.

        A batch's snapshot rows are therefore written completely or not at
        all, and re-running the batch overwrites them in place.
        """
        async with self.transaction() as conn:
            await conn.executemany(query, args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        """Bulk read, e.g. every snapshot of one date."""
        return await self.pool.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        """Single snapshot lookup; None when no row matches."""
        return await self.pool.fetchrow(query, *args)

    async def health_check(self) -> bool:
        """True when the store answers a trivial query."""
        try:
            row = await self.fetchrow("SELECT 1 AS ok")
        except Exception as e:
            logger.warning("Snapshot store health check failed: %s", e)
            return False
        return row is not None and row["ok"] == 1


# Global database instance
_database: Database | None = None


async def get_database() -> Database:
    """Shared connected Database, created on first use."""
    global _database

    if _database is None:
        _database = Database()
        await _database.connect()

    return _database


async def close_database() -> None:
    """Close the shared Database, if open."""
    global _database

    if _database is not None:
        await _database.close()
        _database = None
