"""
Unit tests for the Redis look-aside cache.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from shared.database.redis import RedisClient


@pytest.fixture
def redis_backend():
    """Enable the cache and replace the client with a mock."""
    client = AsyncMock()
    with (
        patch.object(RedisClient, "is_enabled", return_value=True),
        patch.object(RedisClient, "get_client", return_value=client),
    ):
        yield client


class TestDisabledCache:
    """Tests for the cache when it is switched off."""

    async def test_get_returns_default(self) -> None:
        """Test that a disabled cache always misses."""
        assert await RedisClient.get_cached("compliance:abc", default="miss") == "miss"

    async def test_set_is_noop(self) -> None:
        """Test that a disabled cache stores nothing."""
        assert await RedisClient.set_cached("compliance:abc", {"a": 1}) is False

    async def test_health_reports_disabled(self) -> None:
        """Test that health reports the cache as disabled."""
        assert await RedisClient.health_check() == {"status": "disabled"}


class TestEnabledCache:
    """Tests for cache reads and writes."""

    async def test_get_decodes_json(self, redis_backend: AsyncMock) -> None:
        """Test that cached JSON is decoded."""
        redis_backend.get.return_value = json.dumps({"complianceScore": 95})

        assert await RedisClient.get_cached("compliance:abc") == {"complianceScore": 95}
        redis_backend.get.assert_awaited_once_with("compliance:abc")

    async def test_get_miss(self, redis_backend: AsyncMock) -> None:
        """Test that a missing key returns None."""
        redis_backend.get.return_value = None

        assert await RedisClient.get_cached("compliance:abc") is None

    async def test_set_serializes_with_ttl(self, redis_backend: AsyncMock) -> None:
        """Test that dicts are serialized and written with a TTL."""
        redis_backend.setex.return_value = True

        stored = await RedisClient.set_cached("compliance:abc", {"a": 1}, ttl_seconds=60)

        assert stored is True
        redis_backend.setex.assert_awaited_once_with("compliance:abc", 60, '{"a": 1}')

    async def test_get_failure_degrades_to_miss(self, redis_backend: AsyncMock) -> None:
        """Test that a backend failure is treated as a miss."""
        redis_backend.get.side_effect = RedisConnectionError("connection refused")

        assert await RedisClient.get_cached("compliance:abc", default=None) is None

    async def test_set_failure_is_swallowed(self, redis_backend: AsyncMock) -> None:
        """Test that a failed write reports False instead of raising."""
        redis_backend.setex.side_effect = RedisConnectionError("connection refused")

        assert await RedisClient.set_cached("compliance:abc", {"a": 1}) is False

    async def test_delete(self, redis_backend: AsyncMock) -> None:
        """Test deleting a key."""
        redis_backend.delete.return_value = 1

        assert await RedisClient.delete_cached("regulation:4") is True
