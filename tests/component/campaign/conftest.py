"""
Campaign Service Component Test Configuration

In-memory campaign repository and email provider, plus a
CampaignService wired to them with pacing disabled.
"""
import os
import sys
from datetime import datetime
from typing import Dict, List, Optional

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.campaign_service.campaign_service import CampaignService
from microservices.campaign_service.models import Campaign, CampaignStatus, EmailWorkflow, Subscriber
from microservices.campaign_service.protocols import EmailDeliveryError


class MockCampaignRepository:
    """Dict-backed campaign repository with failure injection"""

    def __init__(self):
        self.campaigns: Dict[str, Campaign] = {}
        self.recipients: Dict[str, List[Subscriber]] = {}
        self.workflows: Dict[str, EmailWorkflow] = {}
        self.status_updates: List[tuple] = []
        self.completions: List[dict] = []
        self.claims: List[str] = []
        self.fail_complete = False
        self.fail_update_status = False

    def add_campaign(self, campaign: Campaign, recipients: Optional[List[Subscriber]] = None) -> Campaign:
        self.campaigns[campaign.id] = campaign
        if campaign.mailing_list_id is not None:
            self.recipients[campaign.mailing_list_id] = list(recipients or [])
        return campaign

    def add_workflow(self, workflow: EmailWorkflow) -> EmailWorkflow:
        self.workflows[workflow.id] = workflow
        return workflow

    def _update(self, campaign_id: str, **fields) -> None:
        self.campaigns[campaign_id] = self.campaigns[campaign_id].model_copy(update=fields)

    async def health_check(self) -> bool:
        return True

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        return self.campaigns.get(campaign_id)

    async def get_subscribed_recipients(self, mailing_list_id: str) -> List[Subscriber]:
        return list(self.recipients.get(mailing_list_id, []))

    async def claim_for_sending(self, campaign_id: str, recipient_count: int) -> bool:
        # Check and set happen without a suspension point, like the conditional UPDATE
        campaign = self.campaigns.get(campaign_id)
        if not campaign or campaign.status != CampaignStatus.DRAFT:
            return False
        self.claims.append(campaign_id)
        self._update(campaign_id, status=CampaignStatus.SENDING, recipient_count=recipient_count)
        return True

    async def complete_campaign(
        self, campaign_id: str, delivered_count: int, bounced_count: int, sent_at: datetime
    ) -> None:
        if self.fail_complete:
            raise RuntimeError("database connection lost")
        self.completions.append(
            {"campaign_id": campaign_id, "delivered_count": delivered_count, "bounced_count": bounced_count}
        )
        self._update(
            campaign_id,
            status=CampaignStatus.SENT,
            delivered_count=delivered_count,
            bounced_count=bounced_count,
            sent_at=sent_at,
        )

    async def update_status(self, campaign_id: str, status: CampaignStatus) -> None:
        self.status_updates.append((campaign_id, status))
        if self.fail_update_status:
            raise RuntimeError("database connection lost")
        self._update(campaign_id, status=status)

    async def get_workflow(self, workflow_id: str) -> Optional[EmailWorkflow]:
        return self.workflows.get(workflow_id)


class MockEmailClient:
    """Records every message; addresses in fail_for raise the given error"""

    def __init__(self):
        self.sent: List[dict] = []
        self.fail_for: Dict[str, Exception] = {}

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        from_address: Optional[str] = None,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> Optional[str]:
        if to in self.fail_for:
            raise self.fail_for[to]
        self.sent.append(
            {"to": to, "subject": subject, "html": html, "from": from_address, "text": text, "reply_to": reply_to}
        )
        return f"msg_{len(self.sent)}"

    def fail(self, email: str, message: str = "Invalid recipient", status_code: int = 422) -> None:
        self.fail_for[email] = EmailDeliveryError(message, status_code=status_code)

    async def close(self) -> None:
        pass

    @property
    def recipients(self) -> List[str]:
        return [message["to"] for message in self.sent]


@pytest.fixture
def campaign_repository():
    return MockCampaignRepository()


@pytest.fixture
def email_client():
    return MockEmailClient()


@pytest.fixture
def campaign_service(campaign_repository, email_client):
    return CampaignService(
        campaign_repository,
        email_client,
        batch_size=50,
        batch_delay_seconds=0,
        from_address="news@club.example.org",
    )


@pytest.fixture
def unconfigured_campaign_service(campaign_repository):
    return CampaignService(campaign_repository, email_client=None)
