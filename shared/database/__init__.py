"""
Database Module
===============

Async clients for the relational store and the optional cache.

Clients:
- PostgreSQL (asyncpg + SQLAlchemy)
- Redis (redis.asyncio), look-aside cache only

Usage:
    from shared.database import get_postgres_session, RedisClient

    @router.get("/example")
    async def example(db: AsyncSession = Depends(get_postgres_session)):
        cached = await RedisClient.get_cached("key")
        ...
"""

from shared.database.postgres import (
    Base,
    PostgresClient,
    get_postgres_session,
    postgres_session,
)
from shared.database.redis import RedisClient


__all__ = [
    # PostgreSQL
    "get_postgres_session",
    "postgres_session",
    "PostgresClient",
    "Base",
    # Redis
    "RedisClient",
]
