"""
Campaign Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from .models import Campaign, CampaignStatus, EmailWorkflow, Subscriber


# ====================
# Repository Protocol
# ====================


class CampaignRepositoryProtocol(Protocol):
    """Protocol for campaign data repository"""

    async def health_check(self) -> bool:
        """Check repository health"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        ...

    async def get_subscribed_recipients(self, mailing_list_id: str) -> List[Subscriber]:
        """Subscribers whose list entry and subscriber row are both subscribed"""
        ...

    async def claim_for_sending(self, campaign_id: str, recipient_count: int) -> bool:
        """Atomically move a draft campaign to sending; False if it was not draft"""
        ...

    async def complete_campaign(
        self, campaign_id: str, delivered_count: int, bounced_count: int, sent_at: datetime
    ) -> None:
        """Single final write of a finished dispatch"""
        ...

    async def update_status(self, campaign_id: str, status: CampaignStatus) -> None:
        """Set campaign status"""
        ...

    async def get_workflow(self, workflow_id: str) -> Optional[EmailWorkflow]:
        """Get email workflow by ID"""
        ...


# ====================
# Collaborator Protocols
# ====================


class EmailClientProtocol(Protocol):
    """Interface for the email provider (Resend)"""

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        from_address: Optional[str] = None,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> Optional[str]:
        """Send one message and return the provider message id"""
        ...

    async def close(self) -> None:
        ...


# ====================
# Exceptions
# ====================


class CampaignServiceError(Exception):
    """Base exception for campaign service errors"""
    pass


class InvalidInputError(CampaignServiceError):
    """Raised when a request cannot be processed as given"""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class NoMailingListError(InvalidInputError):
    """Raised when a campaign has no mailing list assigned"""

    def __init__(self):
        super().__init__(
            "Campaign has no mailing list assigned",
            "Please assign a mailing list to this campaign before sending",
        )


class NoRecipientsError(InvalidInputError):
    """Raised when the mailing list has no subscribed recipients"""

    def __init__(self):
        super().__init__(
            "No active subscribers found in this mailing list",
            "Add subscribers to the mailing list before sending the campaign",
        )


class CampaignNotFoundError(CampaignServiceError):
    """Raised when campaign is not found"""

    def __init__(self, message: str = "Campaign not found"):
        super().__init__(message)


class WorkflowNotFoundError(CampaignServiceError):
    """Raised when an email workflow is not found"""

    def __init__(self, message: str = "Workflow not found"):
        super().__init__(message)


class CampaignAlreadyDispatchedError(CampaignServiceError):
    """Raised when a campaign is not in draft status"""

    def __init__(self, current_status: Optional[CampaignStatus] = None):
        super().__init__("Campaign already sent or in progress")
        self.current_status = current_status


class EmailServiceNotConfiguredError(CampaignServiceError):
    """Raised when no email provider API key is configured"""

    def __init__(self):
        super().__init__("Email service not configured")


class EmailDeliveryError(CampaignServiceError):
    """Raised when the email provider rejects or fails a send"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "CampaignRepositoryProtocol",
    "EmailClientProtocol",
    "CampaignServiceError",
    "InvalidInputError",
    "NoMailingListError",
    "NoRecipientsError",
    "CampaignNotFoundError",
    "WorkflowNotFoundError",
    "CampaignAlreadyDispatchedError",
    "EmailServiceNotConfiguredError",
    "EmailDeliveryError",
]
