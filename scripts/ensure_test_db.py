from __future__ import annotations

import asyncio
import re

import asyncpg
import structlog
from sqlalchemy.engine import make_url

from duomatch.core.config import get_settings
from duomatch.core.integration_db_safety import check_integration_db_target
from duomatch.core.logging import configure_logging

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

logger = structlog.get_logger("scripts.ensure_test_db")


async def _ensure_database_exists(database_url: str) -> bool:
    """Creates the local test database if missing; returns True when it was created."""
    check = check_integration_db_target(database_url)
    if not check.is_safe:
        raise RuntimeError(f"Refusing to create database: {check.reason}")
    if IDENTIFIER_RE.fullmatch(check.database_name) is None:
        raise RuntimeError(f"Unsupported database name '{check.database_name}'.")

    parsed = make_url(database_url)
    if parsed.username is None:
        raise RuntimeError("DATABASE_URL username is required.")

    conn = await asyncpg.connect(
        host=parsed.host or "localhost",
        port=int(parsed.port or 5432),
        user=parsed.username,
        password=parsed.password,
        database="postgres",
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", check.database_name)
        if exists:
            logger.info("test_database_exists", database=check.database_name, host=check.host)
            return False

        await conn.execute(f'CREATE DATABASE "{check.database_name}"')
        logger.info("test_database_created", database=check.database_name, host=check.host)
        return True
    finally:
        await conn.close()


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)
    asyncio.run(_ensure_database_exists(settings.database_url))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
