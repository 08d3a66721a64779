"""
Domain Service Data Repository

Data access layer - PostgreSQL (Async)
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import asyncpg

from core.postgres_client import PostgresClient

from .models import DomainRecord, VerificationStatus
from .protocols import DomainAlreadyRegisteredError

logger = logging.getLogger(__name__)


class DomainRepository:
    """Domain service data repository - PostgreSQL (Async)"""

    _COLUMNS = '''
        id, organization_id, domain, verification_token, verification_status,
        verified_at, last_checked_at, created_at, updated_at
    '''

    def __init__(self, db: PostgresClient):
        self.db = db
        self.domains_table = "organization_domains"

    async def initialize(self):
        """Initialize database connection"""
        await self.db.connect()
        logger.info("Domain repository initialized with PostgreSQL")

    async def close(self):
        """Close database connection"""
        await self.db.close()
        logger.info("Domain repository database connection closed")

    async def health_check(self) -> bool:
        """Check repository health"""
        try:
            async with self.db:
                result = await self.db.query_row("SELECT 1 as healthy")
                return result is not None
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    # ====================
    # Queries
    # ====================

    async def get_domain_by_id(self, domain_id: str) -> Optional[DomainRecord]:
        """Get domain record by ID"""
        try:
            query = f'''
                SELECT {self._COLUMNS}
                FROM {self.domains_table}
                WHERE id::text = $1
            '''
            async with self.db:
                row = await self.db.query_row(query, [domain_id])
            return self._row_to_domain(row) if row else None
        except Exception as e:
            logger.error(f"Error getting domain {domain_id}: {e}")
            raise

    async def get_domain_by_name(self, domain: str) -> Optional[DomainRecord]:
        """Get domain record by canonical name"""
        try:
            query = f'''
                SELECT {self._COLUMNS}
                FROM {self.domains_table}
                WHERE domain = $1
            '''
            async with self.db:
                row = await self.db.query_row(query, [domain])
            return self._row_to_domain(row) if row else None
        except Exception as e:
            logger.error(f"Error getting domain by name {domain}: {e}")
            raise

    async def list_domains(self, organization_id: str) -> List[DomainRecord]:
        """List domains of an organization, oldest first"""
        try:
            query = f'''
                SELECT {self._COLUMNS}
                FROM {self.domains_table}
                WHERE organization_id::text = $1
                ORDER BY created_at ASC
            '''
            async with self.db:
                rows = await self.db.query(query, [organization_id])
            return [self._row_to_domain(row) for row in rows]
        except Exception as e:
            logger.error(f"Error listing domains for organization {organization_id}: {e}")
            raise

    # ====================
    # Mutations
    # ====================

    async def create_domain(
        self, organization_id: str, domain: str, verification_token: str
    ) -> DomainRecord:
        """Insert an unverified domain record"""
        now = datetime.now(timezone.utc)
        query = f'''
            INSERT INTO {self.domains_table} (
                id, organization_id, domain, verification_token,
                verification_status, created_at, updated_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $6)
            RETURNING {self._COLUMNS}
        '''
        params = [
            str(uuid.uuid4()),
            organization_id,
            domain,
            verification_token,
            VerificationStatus.UNVERIFIED.value,
            now,
        ]
        try:
            async with self.db:
                row = await self.db.query_row(query, params)
            return self._row_to_domain(row)
        except asyncpg.UniqueViolationError:
            raise DomainAlreadyRegisteredError(domain)
        except Exception as e:
            logger.error(f"Error creating domain {domain}: {e}")
            raise

    async def mark_verified(self, domain_id: str, checked_at: datetime) -> None:
        """Set status verified, verified_at and last_checked_at"""
        try:
            query = f'''
                UPDATE {self.domains_table}
                SET verification_status = $2, verified_at = $3,
                    last_checked_at = $3, updated_at = $3
                WHERE id::text = $1
            '''
            async with self.db:
                await self.db.execute(query, [domain_id, VerificationStatus.VERIFIED.value, checked_at])
        except Exception as e:
            logger.error(f"Error marking domain {domain_id} verified: {e}")
            raise

    async def mark_failed(self, domain_id: str, checked_at: datetime) -> bool:
        """Set status failed and last_checked_at unless the domain is verified; False if it was"""
        try:
            query = f'''
                UPDATE {self.domains_table}
                SET verification_status = $2, last_checked_at = $3, updated_at = $3
                WHERE id::text = $1 AND verification_status <> $4
                RETURNING id
            '''
            params = [domain_id, VerificationStatus.FAILED.value, checked_at, VerificationStatus.VERIFIED.value]
            async with self.db:
                row = await self.db.query_row(query, params)
            return row is not None
        except Exception as e:
            logger.error(f"Error marking domain {domain_id} failed: {e}")
            raise

    # ====================
    # Helpers
    # ====================

    def _row_to_domain(self, row: Dict[str, Any]) -> DomainRecord:
        status = row.get("verification_status") or VerificationStatus.UNVERIFIED.value
        return DomainRecord(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            domain=row["domain"],
            verification_token=row["verification_token"],
            verification_status=VerificationStatus(status),
            verified_at=row.get("verified_at"),
            last_checked_at=row.get("last_checked_at"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


__all__ = ["DomainRepository"]
