"""Postgres datastore adapter (asyncpg connection pool)."""

from __future__ import annotations

import logging
import re
from typing import Sequence

import asyncpg

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PostgresDatastore:
    """Lazily-connected pool exposing the two reads the health checks need."""

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 5.0,
    ) -> None:
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            logger.info("Opening Postgres pool (min=%d max=%d)", self.min_size, self.max_size)
            self._pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
            )
        return self._pool

    async def sample(self, table: str, limit: int = 1) -> int:
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(f'SELECT 1 FROM "{table}" LIMIT $1', limit)
        return len(rows)

    async def existing_tables(self, schema: str, names: Sequence[str]) -> set[str]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = $1 AND table_name = ANY($2::text[])",
                schema,
                list(names),
            )
        return {r["table_name"] for r in rows}

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Postgres pool closed")
