#!/usr/bin/env python3
"""
Database Initialization Script
==============================

Create the Bizcomply schema and seed the regulation corpus.

Usage:
    python scripts/init_databases.py
    python scripts/init_databases.py --schema-only
    python scripts/init_databases.py --reset
    python scripts/init_databases.py --no-businesses

Version: 0.1.0
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.logging import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False, service_name="init-db")
logger = get_logger(__name__)


async def init_postgres() -> bool:
    """Create every compliance checker table."""
    from sqlalchemy import text

    from shared.database.postgres import PostgresClient
    from shared.errors import StorageError

    # Registers the ORM tables on Base.metadata
    import services.compliance_checker.models  # noqa: F401

    logger.info("postgres_initializing")

    try:
        await PostgresClient.create_schema()

        async with PostgresClient.get_engine().connect() as conn:
            result = await conn.execute(text("SELECT version()"))
            version = result.scalar()
            logger.info("postgres_connected", version=str(version)[:50])

        return True

    except StorageError as e:
        logger.error("postgres_initialization_failed", error=str(e.cause or e))
        return False


async def init_redis() -> bool:
    """Verify the cache when it is enabled."""
    from shared.database.redis import RedisClient

    if not RedisClient.is_enabled():
        logger.info("redis_disabled")
        return True

    health = await RedisClient.health_check()
    if health.get("status") != "healthy":
        logger.warning("redis_unavailable", error=health.get("error"))
        return False

    logger.info("redis_connected", version=health.get("redis_version"))
    return True


async def seed_data(reset: bool, with_businesses: bool) -> bool:
    """Seed the regulation corpus and, optionally, sample businesses."""
    from shared.database.postgres import postgres_session

    from services.compliance_checker.seed import (
        reset_tables,
        seed_businesses,
        seed_regulations,
    )

    async with postgres_session() as session:
        if reset:
            await reset_tables(session)

        report = await seed_regulations(session)
        ok = report.ok

        if with_businesses:
            business_report = await seed_businesses(session)
            ok = ok and business_report.ok

    return ok


async def main(args: argparse.Namespace) -> int:
    """Main initialization function."""
    from shared.database.postgres import PostgresClient
    from shared.database.redis import RedisClient

    logger.info("bizcomply_database_initialization")

    results: dict[str, bool] = {}

    try:
        results["PostgreSQL"] = await init_postgres()
        results["Redis"] = await init_redis()

        if results["PostgreSQL"] and not args.schema_only:
            results["Seed Data"] = await seed_data(args.reset, not args.no_businesses)
    finally:
        await PostgresClient.close()
        await RedisClient.close()

    failed = [name for name, success in results.items() if not success]
    for name, success in results.items():
        logger.info("initialization_step", step=name, status="ok" if success else "failed")

    if failed:
        logger.error("initialization_failed", failed=failed)
        return 1

    logger.info("initialization_complete")
    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Initialize the Bizcomply database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Create tables without seeding",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Truncate all tables before seeding",
    )
    parser.add_argument(
        "--no-businesses",
        action="store_true",
        help="Seed regulations only",
    )

    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(args))
    sys.exit(exit_code)
