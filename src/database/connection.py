"""
Database connection and pool management
"""

import asyncpg
import logging
from config.settings import database_config

logger = logging.getLogger(__name__)

# Global database pool
db_pool = None

async def init_database():
    """Initialize database connection pool"""
    global db_pool
    db_pool = await asyncpg.create_pool(
        host=database_config.host,
        port=database_config.port,
        user=database_config.user,
        password=database_config.password,
        database=database_config.database,
        ssl=database_config.ssl_mode,
        min_size=database_config.pool_min_size,
        max_size=database_config.pool_max_size,
        command_timeout=database_config.command_timeout,
    )

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    logger.info(f"Database initialized successfully ({database_config.describe()})")


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")

def get_db_pool():
    """Get the database pool instance"""
    if db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return db_pool
