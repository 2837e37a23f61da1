"""
Base service layer for direct SQL access through the shared asyncpg pool
"""

import logging
from typing import Dict, Any, List, Optional, Sequence
from dataclasses import dataclass

import asyncpg

from database.connection import get_db_pool

logger = logging.getLogger(__name__)

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class BaseService:
    """Base service holding the table name and shared SQL execution helpers"""

    def __init__(self, resource_name: str, columns: Sequence[str]):
        self.resource_name = resource_name
        self.columns = list(columns)
        logger.info(f"BaseService initialized for resource: {resource_name}")

    @property
    def select_all_sql(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.resource_name}"

    async def fetch(self, query: str, *params: Any) -> ServiceResult:
        """
        Run a read-only query and return its rows

        Args:
            query: SQL with $n placeholders
            params: Positional parameters for the placeholders

        Returns:
            ServiceResult with matched records
        """
        try:
            pool = get_db_pool()
            async with pool.acquire() as conn:
                logger.debug(f"Executing READ query: {query}")
                logger.debug(f"Parameters: {params}")
                rows = await conn.fetch(query, *params)
            data = [dict(row) for row in rows]
            return ServiceResult(success=True, data=data, count=len(data))

        except Exception as e:
            logger.error(f"Read operation failed for {self.resource_name}: {e}")
            return self._error_result(e)

    async def execute_and_reread(self, statement: str, *params: Any) -> ServiceResult:
        """
        Run a write statement, then re-read the whole table

        Both run on one connection inside a single transaction, so the
        returned rows always include the effect of the write.

        Returns:
            ServiceResult with every row of the table after the write
        """
        try:
            pool = get_db_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    logger.debug(f"Executing WRITE statement: {statement}")
                    logger.debug(f"Parameters: {params}")
                    status = await conn.execute(statement, *params)
                    logger.info(f"{self.resource_name}: {status}")
                    rows = await conn.fetch(self.select_all_sql)
            data = [dict(row) for row in rows]
            return ServiceResult(success=True, data=data, count=len(data))

        except Exception as e:
            logger.error(f"Write operation failed for {self.resource_name}: {e}", exc_info=True)
            return self._error_result(e)

    @staticmethod
    def _error_result(error: Exception) -> ServiceResult:
        if isinstance(error, (asyncpg.DataError, asyncpg.IntegrityConstraintViolationError)):
            return ServiceResult(
                success=False,
                error=f"Invalid data: {error}",
                error_type="INVALID_DATA"
            )
        return ServiceResult(
            success=False,
            error=f"Database operation failed: {error}",
            error_type="DATABASE_ERROR"
        )
