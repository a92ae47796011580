"""Unit tests for the Redis storage backend."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from questlog.core.errors import StorageReadError, StorageWriteError
from questlog.core.redis_storage import RedisStorage


@pytest.fixture
def redis_storage():
    """RedisStorage with its client replaced by an AsyncMock."""
    storage = RedisStorage("redis://localhost:6379/0")
    storage._client = AsyncMock()
    return storage


@pytest.mark.unit
class TestRedisStorage:
    """Tests for Redis get/set and failure handling."""

    async def test_get_returns_value(self, redis_storage):
        """Verify get returns the stored string."""
        redis_storage._client.get = AsyncMock(return_value="[]")

        result = await redis_storage.get("@tasks")

        assert result == "[]"
        redis_storage._client.get.assert_called_once_with("@tasks")

    async def test_get_missing_key(self, redis_storage):
        redis_storage._client.get = AsyncMock(return_value=None)

        assert await redis_storage.get("@tasks") is None

    async def test_set_overwrites_without_expiry(self, redis_storage):
        """Verify set writes the key with no TTL."""
        redis_storage._client.set = AsyncMock()

        await redis_storage.set("@tasks", "[]")

        redis_storage._client.set.assert_called_once_with("@tasks", "[]")

    async def test_get_failure_raises_read_error(self, redis_storage):
        """Verify connection errors surface as StorageReadError."""
        redis_storage._client.get = AsyncMock(side_effect=RedisConnectionError("Connection refused"))

        with pytest.raises(StorageReadError) as exc_info:
            await redis_storage.get("@tasks")

        assert exc_info.value.key == "@tasks"
        assert redis_storage.get_health_status()["failure_count"] == 1

    async def test_set_failure_raises_write_error(self, redis_storage):
        """Verify connection errors surface as StorageWriteError."""
        redis_storage._client.set = AsyncMock(side_effect=RedisConnectionError("Connection refused"))

        with pytest.raises(StorageWriteError):
            await redis_storage.set("@tasks", "[]")

    async def test_health_status_tracks_success(self, redis_storage):
        redis_storage._client.get = AsyncMock(return_value=None)

        await redis_storage.get("@tasks")

        health = redis_storage.get_health_status()
        assert health["connected"] is True
        assert health["total_operations"] == 1
        assert health["failure_count"] == 0
        assert health["last_successful_operation"] is not None

    async def test_ping(self, redis_storage):
        redis_storage._client.ping = AsyncMock(return_value=True)

        assert await redis_storage.ping() is True

    async def test_ping_failure_returns_false(self, redis_storage):
        redis_storage._client.ping = AsyncMock(side_effect=RedisConnectionError("down"))

        assert await redis_storage.ping() is False

    async def test_closed_storage_raises(self, redis_storage):
        """Verify operations after close fail instead of reconnecting."""
        client = redis_storage._client

        await redis_storage.close()

        client.aclose.assert_awaited_once()
        assert redis_storage.get_health_status()["connected"] is False
        with pytest.raises(StorageReadError):
            await redis_storage.get("@tasks")
        with pytest.raises(StorageWriteError):
            await redis_storage.set("@tasks", "[]")
        assert await redis_storage.ping() is False
