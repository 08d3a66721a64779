"""
PostgreSQL Client Wrapper for the membership platform

Thin asyncpg pool wrapper that keeps the query/query_row/execute access
pattern repositories use. Connection settings come from InfraConfig.

Usage:
    from core.postgres_client import PostgresClient

    db = PostgresClient("domain_service")

    async with db:
        rows = await db.query("SELECT * FROM organization_domains WHERE organization_id = $1", [org_id])
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import asyncpg

from core.config import InfraConfig, get_settings

logger = logging.getLogger(__name__)


class PostgresClient:
    """
    asyncpg pool wrapper.

    The pool is created lazily on first use (or via connect()) and shared
    by every request of the owning service.
    """

    def __init__(self, service_name: str, config: Optional[InfraConfig] = None):
        self.service_name = service_name
        self.config = config or get_settings().infrastructure
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> asyncpg.Pool:
        """Create the connection pool if needed"""
        if self._pool is None:
            async with self._lock:
                if self._pool is None:
                    self._pool = await asyncpg.create_pool(
                        dsn=self.config.postgres_dsn,
                        min_size=self.config.pool_min_size,
                        max_size=self.config.pool_max_size,
                        ssl="require" if self.config.postgres_ssl else None,
                    )
                    logger.info(
                        f"PostgreSQL pool ready for {self.service_name}: "
                        f"{self.config.postgres_host}:{self.config.postgres_port}/{self.config.postgres_db}"
                    )
        return self._pool

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Pool stays open for the lifetime of the service
        return False

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return all rows as dicts"""
        pool = await self.connect()
        rows = await pool.fetch(sql, *(params or []))
        return [dict(row) for row in rows]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return the first row, or None"""
        pool = await self.connect()
        row = await pool.fetchrow(sql, *(params or []))
        return dict(row) if row is not None else None

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> int:
        """Execute a statement and return the number of affected rows"""
        pool = await self.connect()
        status = await pool.execute(sql, *(params or []))
        # asyncpg returns a command tag such as "UPDATE 1"
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError):
            return 0

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info(f"PostgreSQL pool closed for {self.service_name}")
