"""
Redis Client
============

Optional async Redis look-aside cache.

The cache only affects latency: when Redis is disabled or unreachable every
operation degrades to a miss/no-op and the failure is logged.

Version: 0.1.0
"""

import json
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from shared.config import settings
from shared.errors import CacheError
from shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RedisClient:
    """
    Async Redis client wrapper.

    Provides JSON caching utilities and connection management.
    """

    _client: Redis | None = None  # type: ignore[type-arg]

    @classmethod
    def is_enabled(cls) -> bool:
        """Whether cache infrastructure is configured."""
        return settings.redis.enabled

    @classmethod
    def get_client(cls) -> Redis:  # type: ignore[type-arg]
        """Get or create the async client."""
        if cls._client is None:
            cls._client = aioredis.from_url(
                settings.redis.url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                max_connections=50,
            )
            logger.info(
                "redis_client_created",
                host=settings.redis.host,
            )
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the client and release all connections."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
            logger.info("redis_client_closed")

    @classmethod
    async def health_check(cls) -> dict[str, Any]:
        """
        Check Redis health.

        Returns:
            dict with status and server info
        """
        if not cls.is_enabled():
            return {"status": "disabled"}

        try:
            start = time.perf_counter()
            client = cls.get_client()
            pong = await client.ping()
            latency_ms = (time.perf_counter() - start) * 1000

            info = await client.info("server")

            return {
                "status": "healthy" if pong else "unhealthy",
                "latency_ms": round(latency_ms, 2),
                "redis_version": info.get("redis_version", "unknown"),
            }
        except (RedisError, OSError) as e:
            logger.error("redis_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    @classmethod
    async def _execute(
        cls,
        operation: str,
        call: Callable[[Redis], Awaitable[T]],  # type: ignore[type-arg]
    ) -> T:
        """Run a client call, translating backend failures into CacheError."""
        try:
            return await call(cls.get_client())
        except (RedisError, OSError) as e:
            raise CacheError(f"{operation} failed: {e}") from e

    # =========================================================================
    # Caching Utilities
    # =========================================================================

    @classmethod
    async def get_cached(
        cls,
        key: str,
        default: Any = None,
    ) -> Any:
        """
        Get a cached value.

        Args:
            key: Cache key
            default: Returned on a miss or when the cache is unavailable

        Returns:
            Decoded cached value or default
        """
        if not cls.is_enabled():
            return default

        try:
            value = await cls._execute("get", lambda c: c.get(key))
        except CacheError as e:
            logger.warning("cache_get_failed", key=key, error=str(e))
            return default

        if value is None:
            return default

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    @classmethod
    async def set_cached(
        cls,
        key: str,
        value: Any,
        ttl_seconds: int = 3600,
    ) -> bool:
        """
        Set a cached value.

        Args:
            key: Cache key
            value: Value to cache (dicts and lists are JSON serialized)
            ttl_seconds: Time to live in seconds

        Returns:
            True if the value was stored
        """
        if not cls.is_enabled():
            return False

        if isinstance(value, (dict, list)):
            value = json.dumps(value)

        try:
            return bool(await cls._execute("set", lambda c: c.setex(key, ttl_seconds, value)))
        except CacheError as e:
            logger.warning("cache_set_failed", key=key, error=str(e))
            return False

    @classmethod
    async def delete_cached(cls, key: str) -> bool:
        """Delete a cached value."""
        if not cls.is_enabled():
            return False

        try:
            return await cls._execute("delete", lambda c: c.delete(key)) > 0
        except CacheError as e:
            logger.warning("cache_delete_failed", key=key, error=str(e))
            return False

    @classmethod
    async def clear(cls, pattern: str = "*") -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Redis key pattern (e.g., "compliance:*")

        Returns:
            Number of keys deleted
        """
        if not cls.is_enabled():
            return 0

        async def _delete_matching(client: Redis) -> int:  # type: ignore[type-arg]
            keys = [key async for key in client.scan_iter(match=pattern)]
            if keys:
                return await client.delete(*keys)
            return 0

        try:
            deleted = await cls._execute("clear", _delete_matching)
        except CacheError as e:
            logger.warning("cache_clear_failed", pattern=pattern, error=str(e))
            return 0

        logger.info("cache_cleared", pattern=pattern, deleted=deleted)
        return deleted
