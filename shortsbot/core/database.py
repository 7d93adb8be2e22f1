"""PostgreSQL connection pool management for the document store."""

import logging

import asyncpg

logger = logging.getLogger(__name__)

_DOCUMENTS_DDL = """
CREATE TABLE IF NOT EXISTS documents (
    name       TEXT PRIMARY KEY,
    body       JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class DatabaseManager:
    """Manages PostgreSQL connection pool lifecycle"""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Initialize database connection pool and make sure the table exists"""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        try:
            # Transaction Pooler (6543) does not support prepared statements
            is_transaction_pooler = ":6543" in self.database_url
            cache_size = 0 if is_transaction_pooler else 100

            self._pool = await asyncpg.create_pool(
                self.database_url,
                min_size=1,
                max_size=5,
                timeout=30.0,
                command_timeout=60.0,
                statement_cache_size=cache_size,
                max_inactive_connection_lifetime=300.0,
            )
            async with self._pool.acquire() as conn:
                await conn.execute(_DOCUMENTS_DDL)
            logger.info(f"Database pool created (cache={cache_size})")
        except Exception as e:
            logger.exception(f"Failed to create database pool: {e}")
            raise

    async def disconnect(self) -> None:
        """Close database connection pool"""
        if self._pool is None:
            return

        try:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")
        except Exception as e:
            logger.exception(f"Error closing database pool: {e}")

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the database connection pool"""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool

    async def check_health(self) -> bool:
        """Run ``SELECT 1``; False when the pool is missing or the query fails"""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {type(e).__name__}: {e}")
            return False
