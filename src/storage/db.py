"""
PostgreSQL access for the bucket store.

One asyncpg pool per process, created at startup and shared by every
request. Query helpers borrow a connection for a single statement;
`transaction()` keeps one connection for several.
"""

import logging
import os
import pathlib
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg

logger = logging.getLogger(__name__)

# Unset means "no database": the service falls back to the in-memory store.
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", "2"))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", "10"))

SCHEMA_PATH = pathlib.Path(__file__).parent / "schema.sql"

_pool: Optional[asyncpg.Pool] = None


async def init_db_pool(
    dsn: Optional[str] = None,
    min_size: int = DB_POOL_MIN_SIZE,
    max_size: int = DB_POOL_MAX_SIZE,
    command_timeout: float = 60.0,
) -> asyncpg.Pool:
    global _pool

    if _pool is not None:
        logger.warning("Database pool already initialized")
        return _pool

    logger.info(f"Connecting to PostgreSQL (pool {min_size}..{max_size})")
    try:
        _pool = await asyncpg.create_pool(
            dsn or DATABASE_URL,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Could not connect to PostgreSQL: {e}")
        raise
    return _pool


async def close_db_pool() -> None:
    global _pool

    if _pool is None:
        return
    await _pool.close()
    _pool = None
    logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_db_pool() first.")
    return _pool


@asynccontextmanager
async def transaction():
    """
    Usage:
        async with transaction() as conn:
            row = await conn.fetchrow(...)
            await conn.execute(...)
    """
    async with get_pool().acquire() as conn:
        async with conn.transaction():
            yield conn


async def execute(query: str, *args) -> str:
    """Returns the command status, e.g. "UPDATE 1"."""
    async with get_pool().acquire() as conn:
        return await conn.execute(query, *args)


async def fetch(query: str, *args) -> list:
    async with get_pool().acquire() as conn:
        return await conn.fetch(query, *args)


async def fetchrow(query: str, *args):
    async with get_pool().acquire() as conn:
        return await conn.fetchrow(query, *args)


async def init_schema() -> None:
    """Apply schema.sql; every statement in it is IF NOT EXISTS."""
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

    async with get_pool().acquire() as conn:
        await conn.execute(SCHEMA_PATH.read_text())
    logger.info("Database schema is up to date")


async def health_check() -> dict:
    try:
        async with get_pool().acquire() as conn:
            await conn.fetchval("SELECT 1")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}

    return {
        "status": "healthy",
        "database": "connected",
        "pool_size": _pool.get_size(),
        "pool_free": _pool.get_idle_size(),
    }
