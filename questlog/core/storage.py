"""Key-value storage interface and in-memory backend."""

import logging
import threading
import time
from typing import Any, Protocol, runtime_checkable

from questlog.core.config import Settings, settings
from questlog.core.redis_storage import RedisStorage
from questlog.core.sqlite_storage import SQLiteStorage


logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Async key-value provider the task store persists through.

    Backends raise StorageReadError / StorageWriteError on failure; the
    store decides how to recover.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored string for key, or None if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Overwrite key with value."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...


class InMemoryStorage:
    """Thread-safe dict-backed storage for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize in-memory storage, optionally pre-seeded."""
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

        # Health tracking
        self._last_successful_operation: float | None = None
        self._total_operations = 0

    def get_health_status(self) -> dict[str, Any]:
        """Get storage health status."""
        return {
            "backend": "memory",
            "last_successful_operation": self._last_successful_operation,
            "total_operations": self._total_operations,
            "entries": len(self._data),
        }

    def _record_success(self) -> None:
        self._last_successful_operation = time.time()
        self._total_operations += 1

    async def get(self, key: str) -> str | None:
        """Get value for key."""
        with self._lock:
            value = self._data.get(key)
            self._record_success()
            return value

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with self._lock:
            self._data[key] = value
            self._record_success()
            logger.debug("Stored key: %s (%d bytes)", key, len(value))

    async def close(self) -> None:
        """Nothing to release."""
        return

    def dump(self) -> dict[str, str]:
        """Return a copy of every stored key and value."""
        with self._lock:
            return dict(self._data)


def get_storage(app_settings: Settings | None = None) -> KeyValueStorage:
    """Build the storage backend selected by settings.storage_backend.

    Raises:
        ValueError: If the redis backend is selected without REDIS_URL
    """
    active = app_settings or settings
    backend = active.storage_backend

    if backend == "memory":
        logger.info("Using in-memory storage. Data will not survive restarts.")
        return InMemoryStorage()

    if backend == "redis":
        url = active.require_credential("redis_url", "Redis")
        return RedisStorage(url)

    return SQLiteStorage(active.sqlite_db_path)
