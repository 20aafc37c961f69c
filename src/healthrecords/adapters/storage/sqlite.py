"""SQLite storage adapter for speed records."""

import asyncio
import json
import logging
import sqlite3
import threading
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timedelta
from typing import Any

import aiosqlite

from healthrecords.core.encoding.ndjson import (
    metadata_from_dict,
    metadata_to_dict,
    offset_from_seconds,
    offset_seconds,
)
from healthrecords.core.models import EPOCH, SpeedRecord

logger = logging.getLogger(__name__)

_SPEED_SCHEMA = """
CREATE TABLE IF NOT EXISTS speed_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    speed_meters_per_second REAL NOT NULL,
    time_us INTEGER NOT NULL,
    zone_offset_seconds INTEGER,
    metadata TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_speed_records_time ON speed_records(time_us);
"""

_INSERT_RECORD = """
INSERT INTO speed_records
    (speed_meters_per_second, time_us, zone_offset_seconds, metadata)
VALUES (?, ?, ?, ?)
"""

_SELECT_RECORDS_SINCE = """
SELECT speed_meters_per_second, time_us, zone_offset_seconds, metadata
FROM speed_records
WHERE ? IS NULL OR time_us > ?
ORDER BY time_us ASC, id ASC
"""

_COUNT_RECORDS = """
SELECT COUNT(*) FROM speed_records
"""

_DELETE_RECORDS_BEFORE = """
DELETE FROM speed_records WHERE time_us < ?
"""

_CLEAR_RECORDS = """
DELETE FROM speed_records
"""

_ONE_MICROSECOND = timedelta(microseconds=1)


def _to_micros(instant: datetime) -> int:
    """Convert an aware datetime to integer microseconds since the epoch."""
    return (instant - EPOCH) // _ONE_MICROSECOND


def _from_micros(micros: int) -> datetime:
    return EPOCH + timedelta(microseconds=micros)


def _since_params(since: datetime | None) -> tuple[int | None, int | None]:
    since_us = _to_micros(since) if since is not None else None
    return since_us, since_us


def _to_row(record: SpeedRecord) -> tuple[Any, ...]:
    """Convert a SpeedRecord to a database row tuple."""
    return (
        record.speed_meters_per_second,
        _to_micros(record.time),
        offset_seconds(record.zone_offset),
        json.dumps(metadata_to_dict(record.metadata)),
    )


def _from_row(row: sqlite3.Row | aiosqlite.Row) -> SpeedRecord:
    """Convert a database row to a SpeedRecord.

    Row can be either sqlite3.Row (sync) or aiosqlite.Row (async) - both
    support index-based access.
    """
    return SpeedRecord(
        speed_meters_per_second=row[0],
        time=_from_micros(row[1]),
        zone_offset=offset_from_seconds(row[2]),
        metadata=metadata_from_dict(json.loads(row[3])),
    )


# @tra: Adapter.SQLiteStorage.ImplementsSpeedRecordStoragePort
# @tra: Adapter.SQLiteStorage.PersistsAcrossInstances
class SQLiteSpeedRecordStorage:
    """SQLite implementation of SpeedRecordStoragePort.

    Stores speed records in a SQLite database using aiosqlite for
    non-blocking async operations. Uses WAL mode for concurrent access.

    For :memory: databases, a persistent connection is maintained since
    in-memory databases are connection-scoped in SQLite.

    Sync methods (write_sync, read_sync, clear_sync) use the standard
    sqlite3 module for non-async contexts like scripts or testing.
    For file-based databases, sync and async methods share the same file.
    For :memory: databases, sync and async have separate in-memory DBs.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None
        # Sync state (uses standard sqlite3 module)
        self._sync_initialized = False
        self._sync_lock = threading.Lock()
        self._sync_conn: sqlite3.Connection | None = None

    @property
    def _is_memory(self) -> bool:
        return self._db_path == ":memory:"

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._is_memory:
                self._persistent_conn = await aiosqlite.connect(":memory:")
                await self._persistent_conn.executescript(_SPEED_SCHEMA)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(_SPEED_SCHEMA)
            self._initialized = True
            logger.debug("Initialized speed record schema at %s", self._db_path)

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection, closing it afterwards for file databases."""
        await self._ensure_initialized()
        if self._is_memory:
            if self._persistent_conn is None:
                raise RuntimeError("Memory database connection not initialized")
            yield self._persistent_conn
            return
        db = await aiosqlite.connect(self._db_path)
        try:
            yield db
        finally:
            await db.close()

    async def write(self, record: SpeedRecord) -> None:
        """Write a speed record to storage."""
        async with self._connection() as db:
            await db.execute(_INSERT_RECORD, _to_row(record))
            await db.commit()

    async def read(self, since: datetime | None = None) -> AsyncIterable[SpeedRecord]:
        """Read speed records measured after the given instant.

        Returns records with time > since, ordered by time ascending.
        """
        async with self._connection() as db:
            async with db.execute(_SELECT_RECORDS_SINCE, _since_params(since)) as cursor:
                async for row in cursor:
                    yield _from_row(row)

    async def count(self) -> int:
        """Return total number of speed records in storage."""
        async with self._connection() as db:
            async with db.execute(_COUNT_RECORDS) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def delete_before(self, before: datetime) -> int:
        """Delete speed records with time < given instant."""
        async with self._connection() as db:
            cursor = await db.execute(_DELETE_RECORDS_BEFORE, (_to_micros(before),))
            deleted = cursor.rowcount
            await db.commit()
        logger.debug("Deleted %d speed records before %s", deleted, before.isoformat())
        return deleted

    async def clear(self) -> None:
        """Clear all records from storage."""
        async with self._connection() as db:
            await db.execute(_CLEAR_RECORDS)
            await db.commit()

    async def close(self) -> None:
        """Close persistent connections (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False
        self.close_sync()

    def close_sync(self) -> None:
        """Close the persistent sync connection (for :memory: databases)."""
        with self._sync_lock:
            if self._sync_conn is not None:
                self._sync_conn.close()
                self._sync_conn = None
                self._sync_initialized = False

    # --- Sync methods using standard sqlite3 module ---

    def _ensure_initialized_sync(self) -> None:
        """Initialize database schema synchronously."""
        if self._sync_initialized:
            return
        with self._sync_lock:
            if self._sync_initialized:
                return
            if self._is_memory:
                # Separate from the async in-memory database
                self._sync_conn = sqlite3.connect(":memory:")
                self._sync_conn.executescript(_SPEED_SCHEMA)
            else:
                conn = sqlite3.connect(self._db_path)
                try:
                    conn.execute("PRAGMA journal_mode=WAL")
                    conn.executescript(_SPEED_SCHEMA)
                finally:
                    conn.close()
            self._sync_initialized = True

    @contextmanager
    def _sync_connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a sync connection, closing it afterwards for file databases."""
        self._ensure_initialized_sync()
        if self._is_memory:
            if self._sync_conn is None:
                raise RuntimeError("Sync memory database connection not initialized")
            yield self._sync_conn
            return
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
        finally:
            conn.close()

    def write_sync(self, record: SpeedRecord) -> None:
        """Synchronous write for non-async contexts."""
        with self._sync_connection() as conn:
            conn.execute(_INSERT_RECORD, _to_row(record))
            conn.commit()

    def read_sync(self, since: datetime | None = None) -> list[SpeedRecord]:
        """Synchronous read for non-async contexts."""
        with self._sync_connection() as conn:
            cursor = conn.execute(_SELECT_RECORDS_SINCE, _since_params(since))
            return [_from_row(row) for row in cursor]

    def clear_sync(self) -> None:
        """Synchronous clear for non-async contexts."""
        with self._sync_connection() as conn:
            conn.execute(_CLEAR_RECORDS)
            conn.commit()
