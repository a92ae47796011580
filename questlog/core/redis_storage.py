"""Redis key-value storage for shared or server-side deployments."""

import logging
from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError

from questlog.core.config import Constants
from questlog.core.errors import StorageReadError, StorageWriteError


logger = logging.getLogger(__name__)


class RedisStorage:
    """Async Redis storage wrapper with connection pooling.

    Keys never expire. Failures are raised as storage errors; retrying is
    left to the caller.
    """

    def __init__(self, redis_url: str) -> None:
        """Initialize Redis storage for the given URL."""
        self._pool = ConnectionPool.from_url(
            redis_url,
            decode_responses=True,
            max_connections=Constants.REDIS_MAX_CONNECTIONS,
        )
        self._client: Redis | None = Redis(connection_pool=self._pool)
        logger.info("Redis storage initialized with URL: %s", redis_url)

        # Health tracking
        self._last_successful_operation: datetime | None = None
        self._failure_count = 0
        self._total_operations = 0

    def get_health_status(self) -> dict[str, Any]:
        """Get Redis health status.

        Returns:
            Dict with last successful operation, failure count, and total operations
        """
        return {
            "backend": "redis",
            "connected": self._client is not None,
            "last_successful_operation": self._last_successful_operation.isoformat()
            if self._last_successful_operation
            else None,
            "failure_count": self._failure_count,
            "total_operations": self._total_operations,
        }

    def _record_success(self) -> None:
        self._last_successful_operation = datetime.now(UTC)
        self._total_operations += 1

    def _record_failure(self) -> None:
        self._failure_count += 1
        self._total_operations += 1

    async def get(self, key: str) -> str | None:
        """Get value from Redis.

        Raises:
            StorageReadError: If Redis is closed or the command fails
        """
        if self._client is None:
            raise StorageReadError(key, "Redis storage is closed")

        try:
            value = await self._client.get(key)
        except RedisError as e:
            self._record_failure()
            logger.warning("Redis GET error for key %s: %s", key, e)
            raise StorageReadError(key, f"Redis GET failed: {e}") from e

        self._record_success()
        return value

    async def set(self, key: str, value: str) -> None:
        """Overwrite key with value.

        Raises:
            StorageWriteError: If Redis is closed or the command fails
        """
        if self._client is None:
            raise StorageWriteError(key, "Redis storage is closed")

        try:
            await self._client.set(key, value)
        except RedisError as e:
            self._record_failure()
            logger.warning("Redis SET error for key %s: %s", key, e)
            raise StorageWriteError(key, f"Redis SET failed: {e}") from e

        self._record_success()
        logger.debug("Stored key: %s (%d bytes)", key, len(value))

    async def ping(self) -> bool:
        """Ping Redis to check connection."""
        if self._client is None:
            return False

        try:
            result = await self._client.ping()  # type: ignore[misc]
            return bool(result)
        except RedisError as e:
            logger.warning("Redis PING failed: %s", e)
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis storage closed")
