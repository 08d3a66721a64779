"""
Campaign Service Data Models

Pydantic models for email campaigns, subscribers, workflow emails
and the HTTP API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CampaignStatus(str, Enum):
    """Campaign lifecycle status"""
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SubscriptionStatus(str, Enum):
    """Status of a subscriber and of a list membership"""
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"


# ====================
# Core Models
# ====================

class Campaign(BaseModel):
    """An email campaign targeting one mailing list"""
    id: str
    organization_id: str
    name: Optional[str] = None
    subject: str = ""
    content: str = ""
    mailing_list_id: Optional[str] = None
    status: CampaignStatus = CampaignStatus.DRAFT
    recipient_count: int = 0
    delivered_count: int = 0
    bounced_count: int = 0
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Subscriber(BaseModel):
    """A recipient resolved from a mailing list"""
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class EmailWorkflow(BaseModel):
    """An automated email of an organization"""
    id: str
    organization_id: str
    name: Optional[str] = None
    email_subject: str = ""
    email_template: str = ""

    model_config = {"from_attributes": True}


class RecipientResult(BaseModel):
    """Outcome of one send attempt"""
    email: str
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class DispatchStats(BaseModel):
    """Aggregated outcome of a dispatch"""
    total: int = 0
    sent: int = 0
    delivered: int = 0
    failed: int = 0


class RecipientError(BaseModel):
    """A failed recipient as reported to the caller"""
    email: str
    error: str


# ====================
# Request Models
# ====================

class CampaignSendRequest(BaseModel):
    """Request to dispatch a draft campaign"""
    campaign_id: str = Field(..., min_length=1)


class WorkflowEmailRequest(BaseModel):
    """Request to send one workflow email"""
    to: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    html_body: Optional[str] = None
    text_body: Optional[str] = None
    recipient_name: Optional[str] = None
    workflow_id: str = Field(..., min_length=1)
    organization_id: str = Field(..., min_length=1)


class WorkflowTestData(BaseModel):
    """Sample values for a workflow test send"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    membership_type: Optional[str] = None


class WorkflowTestRequest(BaseModel):
    """Request to send a workflow to a test address"""
    workflow_id: str = Field(..., min_length=1)
    test_email: str = Field(..., min_length=1)
    test_data: Optional[WorkflowTestData] = None


# ====================
# Response Models
# ====================

class CampaignSendResponse(BaseModel):
    """Dispatch result"""
    success: bool
    message: str
    stats: DispatchStats
    errors: Optional[List[RecipientError]] = None


class WorkflowEmailResponse(BaseModel):
    """Workflow email result"""
    success: bool
    email_id: Optional[str] = None


class WorkflowTestResponse(BaseModel):
    """Workflow test send result"""
    success: bool
    message: str
    email_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response"""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    details: Dict[str, str] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Liveness check response"""
    alive: bool
    uptime_seconds: float


__all__ = [
    "CampaignStatus",
    "SubscriptionStatus",
    "Campaign",
    "Subscriber",
    "EmailWorkflow",
    "RecipientResult",
    "DispatchStats",
    "RecipientError",
    "CampaignSendRequest",
    "WorkflowEmailRequest",
    "WorkflowTestData",
    "WorkflowTestRequest",
    "CampaignSendResponse",
    "WorkflowEmailResponse",
    "WorkflowTestResponse",
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
]
