# ============================================================================
# KEY-VALUE STORES
# ============================================================================
# STATUS: Infrastructure - Counter and rate-limit storage
# PURPOSE: get/put string values with optional expiry
# CREATED: 03 SEP 2026
# ============================================================================
"""
Key-Value Stores

The counter store and the rate-limit store share one minimal interface:

    get(key) -> Optional[str]
    put(key, value, ttl_seconds=None)

There is no atomic increment and no transaction across keys. Callers that
read-modify-write (likes, downloads, ratings) accept last-write-wins.

Backends:
- MemoryKeyValueStore: process-local dict with expiry (development, tests)
- PostgresKeyValueStore: one shared table, one namespace per store

Usage:
    counts = PostgresKeyValueStore(pool, namespace="counts")
    await counts.put("likes:42", "7")
    await counts.get("likes:42")   # "7"
"""

import heapq
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from psycopg import sql
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Atomic-per-key string store with optional per-entry TTL."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value, or None if absent or expired."""

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Write a value; ``ttl_seconds`` makes the entry expire."""

    async def ping(self) -> bool:
        """Readiness check."""
        return True

    async def close(self) -> None:
        return None


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process store.

    Expiry is evaluated on read against ``clock`` (monotonic by default;
    tests inject a fake clock). Each put also drops every entry whose expiry
    is due, popping them from a heap ordered by expiry time.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, Optional[float]]] = {}
        self._expiry_heap: List[Tuple[float, str]] = []

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        now = self._clock()
        self._sweep(now)
        expires_at = now + ttl_seconds if ttl_seconds else None
        self._entries[key] = (str(value), expires_at)
        if expires_at is not None:
            heapq.heappush(self._expiry_heap, (expires_at, key))

    def _sweep(self, now: float) -> int:
        removed = 0
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiry_heap)
            entry = self._entries.get(key)
            # Stale heap record: the key was rewritten with another expiry
            if entry is not None and entry[1] == expires_at:
                del self._entries[key]
                removed += 1
        return removed

    def sweep(self) -> int:
        """Drop every expired entry now; returns how many were removed."""
        return self._sweep(self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


class PostgresKeyValueStore(KeyValueStore):
    """
    PostgreSQL-backed store.

    Rows: (namespace, key) -> value, expires_at. Expired rows are invisible
    to reads. Every ``sweep_every`` puts, the writer also deletes the
    namespace's expired rows.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        namespace: str,
        schema: str = "edge",
        table: str = "kv_entries",
        sweep_every: int = 500,
    ):
        self.pool = pool
        self.namespace = namespace
        self.schema = schema
        self.sweep_every = sweep_every
        self._table = sql.Identifier(schema, table)
        self._puts = 0

    async def ensure_schema(self) -> None:
        """Create schema and table if missing (idempotent)."""
        async with self.pool.connection() as conn:
            await conn.execute(
                sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(self.schema))
            )
            await conn.execute(
                sql.SQL(
                    """
                    CREATE TABLE IF NOT EXISTS {} (
                        namespace  VARCHAR(32)  NOT NULL,
                        key        VARCHAR(512) NOT NULL,
                        value      TEXT         NOT NULL,
                        expires_at TIMESTAMPTZ,
                        updated_at TIMESTAMPTZ  NOT NULL DEFAULT now(),
                        PRIMARY KEY (namespace, key)
                    )
                    """
                ).format(self._table)
            )
        logger.info(f"Key-value table ready: {self.schema}.kv_entries")

    async def get(self, key: str) -> Optional[str]:
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL(
                    """
                    SELECT value FROM {}
                    WHERE namespace = %s AND key = %s
                      AND (expires_at IS NULL OR expires_at > now())
                    """
                ).format(self._table),
                (self.namespace, key),
            )
            row = await result.fetchone()
        return row[0] if row else None

    async def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = (
            datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
            if ttl_seconds
            else None
        )
        async with self.pool.connection() as conn:
            await conn.execute(
                sql.SQL(
                    """
                    INSERT INTO {} (namespace, key, value, expires_at, updated_at)
                    VALUES (%s, %s, %s, %s, now())
                    ON CONFLICT (namespace, key) DO UPDATE
                    SET value = EXCLUDED.value,
                        expires_at = EXCLUDED.expires_at,
                        updated_at = now()
                    """
                ).format(self._table),
                (self.namespace, key, str(value), expires_at),
            )

        self._puts += 1
        if self.sweep_every and self._puts % self.sweep_every == 0:
            await self.sweep()

    async def sweep(self) -> int:
        """Delete this namespace's expired rows; returns the row count."""
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL(
                    """
                    DELETE FROM {}
                    WHERE namespace = %s
                      AND expires_at IS NOT NULL AND expires_at <= now()
                    """
                ).format(self._table),
                (self.namespace,),
            )
            removed = result.rowcount
        if removed:
            logger.info(f"Swept {removed} expired {self.namespace} entries")
        return removed

    async def ping(self) -> bool:
        try:
            async with self.pool.connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except Exception as e:
            logger.error(f"Key-value store ping failed ({self.namespace}): {e}")
            return False


__all__ = ["KeyValueStore", "MemoryKeyValueStore", "PostgresKeyValueStore"]
