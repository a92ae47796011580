"""SQLite key-value storage backed by aiosqlite."""

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from questlog.core.config import Constants
from questlog.core.errors import StorageReadError, StorageWriteError


logger = logging.getLogger(__name__)

_TABLE = Constants.SQLITE_KV_TABLE


class SQLiteStorage:
    """On-device key-value storage in a single SQLite table.

    Each key holds one whole serialized collection; writes overwrite the row.
    The connection is opened lazily on first use and reused afterwards.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialize storage for the given database file."""
        self._db_path = Path(db_path).resolve()
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def db_path(self) -> Path:
        """Resolved database file path."""
        return self._db_path

    async def _get_connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        async with self._lock:
            # Double-check after acquiring lock
            if self._conn is not None:
                return self._conn

            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(str(self._db_path))
            await conn.execute("PRAGMA journal_mode = WAL")
            await conn.execute(
                f"CREATE TABLE IF NOT EXISTS {_TABLE} ("
                "key TEXT PRIMARY KEY, "
                "value TEXT NOT NULL, "
                "updated TEXT NOT NULL)"
            )
            await conn.commit()
            self._conn = conn

            logger.info("Opened SQLite storage", extra={"db_path": str(self._db_path)})
            return conn

    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None when absent.

        Raises:
            StorageReadError: If the database cannot be queried
        """
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(f"SELECT value FROM {_TABLE} WHERE key = ?", (key,))  # noqa: S608
            row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as e:
            logger.error("sqlite_get_failed", extra={"key": key, "error": str(e)})
            raise StorageReadError(key, f"Failed to read from SQLite: {e}") from e

        if row is None:
            return None
        return row[0]

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key.

        Raises:
            StorageWriteError: If the write cannot be committed
        """
        updated = datetime.now(UTC).isoformat()
        try:
            conn = await self._get_connection()
            await conn.execute(
                f"INSERT INTO {_TABLE} (key, value, updated) VALUES (?, ?, ?) "  # noqa: S608
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated = excluded.updated",
                (key, value, updated),
            )
            await conn.commit()
        except (aiosqlite.Error, OSError) as e:
            logger.error("sqlite_set_failed", extra={"key": key, "error": str(e)})
            raise StorageWriteError(key, f"Failed to write to SQLite: {e}") from e

        logger.debug("Stored key", extra={"key": key, "bytes": len(value)})

    async def close(self) -> None:
        """Close the SQLite connection if one was opened."""
        if self._conn is None:
            return
        try:
            await self._conn.close()
            logger.info("Closed SQLite storage", extra={"db_path": str(self._db_path)})
        except aiosqlite.Error as e:
            logger.warning("Error closing SQLite connection", extra={"error": str(e)})
        finally:
            self._conn = None
