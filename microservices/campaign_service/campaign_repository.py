"""
Campaign Service Data Repository

Data access layer - PostgreSQL (Async)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClient

from .models import (
    Campaign,
    CampaignStatus,
    EmailWorkflow,
    Subscriber,
    SubscriptionStatus,
)

logger = logging.getLogger(__name__)


class CampaignRepository:
    """Campaign service data repository - PostgreSQL (Async)"""

    def __init__(self, db: PostgresClient):
        self.db = db

        # Table names
        self.campaigns_table = "email_campaigns"
        self.list_members_table = "subscriber_lists"
        self.subscribers_table = "email_subscribers"
        self.workflows_table = "email_workflows"

    async def initialize(self):
        """Initialize database connection"""
        await self.db.connect()
        logger.info("Campaign repository initialized with PostgreSQL")

    async def close(self):
        """Close database connection"""
        await self.db.close()
        logger.info("Campaign repository database connection closed")

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
    # Campaigns
    # ====================

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        try:
            query = f'''
                SELECT id, organization_id, name, subject, content, mailing_list_id,
                       status, recipient_count, delivered_count, bounced_count,
                       sent_at, created_at, updated_at
                FROM {self.campaigns_table}
                WHERE id::text = $1
            '''
            async with self.db:
                row = await self.db.query_row(query, [campaign_id])
            return self._row_to_campaign(row) if row else None
        except Exception as e:
            logger.error(f"Error getting campaign {campaign_id}: {e}")
            raise

    async def get_subscribed_recipients(self, mailing_list_id: str) -> List[Subscriber]:
        """Subscribers whose list entry and subscriber row are both subscribed"""
        try:
            query = f'''
                SELECT s.id, s.email, s.first_name, s.last_name
                FROM {self.list_members_table} sl
                JOIN {self.subscribers_table} s ON s.id = sl.subscriber_id
                WHERE sl.mailing_list_id::text = $1
                  AND sl.status = $2
                  AND s.status = $2
                ORDER BY s.email
            '''
            async with self.db:
                rows = await self.db.query(query, [mailing_list_id, SubscriptionStatus.SUBSCRIBED.value])
            return [
                Subscriber(
                    id=str(row["id"]),
                    email=row["email"],
                    first_name=row.get("first_name"),
                    last_name=row.get("last_name"),
                )
                for row in rows
                if row.get("email")
            ]
        except Exception as e:
            logger.error(f"Error getting recipients of list {mailing_list_id}: {e}")
            raise

    async def claim_for_sending(self, campaign_id: str, recipient_count: int) -> bool:
        """Atomically move a draft campaign to sending; False if it was not draft"""
        try:
            query = f'''
                UPDATE {self.campaigns_table}
                SET status = $2, recipient_count = $3, updated_at = $4
                WHERE id::text = $1 AND status = $5
                RETURNING id
            '''
            params = [
                campaign_id,
                CampaignStatus.SENDING.value,
                recipient_count,
                datetime.now(timezone.utc),
                CampaignStatus.DRAFT.value,
            ]
            async with self.db:
                row = await self.db.query_row(query, params)
            return row is not None
        except Exception as e:
            logger.error(f"Error claiming campaign {campaign_id}: {e}")
            raise

    async def complete_campaign(
        self, campaign_id: str, delivered_count: int, bounced_count: int, sent_at: datetime
    ) -> None:
        """Single final write of a finished dispatch"""
        try:
            query = f'''
                UPDATE {self.campaigns_table}
                SET status = $2, delivered_count = $3, bounced_count = $4,
                    sent_at = $5, updated_at = $5
                WHERE id::text = $1
            '''
            params = [campaign_id, CampaignStatus.SENT.value, delivered_count, bounced_count, sent_at]
            async with self.db:
                await self.db.execute(query, params)
        except Exception as e:
            logger.error(f"Error completing campaign {campaign_id}: {e}")
            raise

    async def update_status(self, campaign_id: str, status: CampaignStatus) -> None:
        """Set campaign status"""
        try:
            query = f'''
                UPDATE {self.campaigns_table}
                SET status = $2, updated_at = $3
                WHERE id::text = $1
            '''
            async with self.db:
                await self.db.execute(query, [campaign_id, status.value, datetime.now(timezone.utc)])
        except Exception as e:
            logger.error(f"Error updating status of campaign {campaign_id}: {e}")
            raise

    # ====================
    # Workflows
    # ====================

    async def get_workflow(self, workflow_id: str) -> Optional[EmailWorkflow]:
        """Get email workflow by ID"""
        try:
            query = f'''
                SELECT id, organization_id, name, email_subject, email_template
                FROM {self.workflows_table}
                WHERE id::text = $1
            '''
            async with self.db:
                row = await self.db.query_row(query, [workflow_id])
            if not row:
                return None
            return EmailWorkflow(
                id=str(row["id"]),
                organization_id=str(row["organization_id"]),
                name=row.get("name"),
                email_subject=row.get("email_subject") or "",
                email_template=row.get("email_template") or "",
            )
        except Exception as e:
            logger.error(f"Error getting workflow {workflow_id}: {e}")
            raise

    # ====================
    # Helpers
    # ====================

    def _row_to_campaign(self, row: Dict[str, Any]) -> Campaign:
        return Campaign(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            name=row.get("name"),
            subject=row.get("subject") or "",
            content=row.get("content") or "",
            mailing_list_id=str(row["mailing_list_id"]) if row.get("mailing_list_id") else None,
            status=CampaignStatus(row.get("status") or CampaignStatus.DRAFT.value),
            recipient_count=row.get("recipient_count") or 0,
            delivered_count=row.get("delivered_count") or 0,
            bounced_count=row.get("bounced_count") or 0,
            sent_at=row.get("sent_at"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


__all__ = ["CampaignRepository"]
