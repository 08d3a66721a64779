"""
Campaign Service Business Logic

Implements campaign dispatch to mailing list subscribers and the
workflow email sends.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from core.auth_dependencies import AuthContext
from core.validation import validate_email

from .models import (
    Campaign,
    CampaignSendResponse,
    CampaignStatus,
    DispatchStats,
    RecipientError,
    RecipientResult,
    Subscriber,
    WorkflowEmailRequest,
    WorkflowEmailResponse,
    WorkflowTestRequest,
    WorkflowTestResponse,
)
from .protocols import (
    CampaignAlreadyDispatchedError,
    CampaignNotFoundError,
    CampaignRepositoryProtocol,
    EmailClientProtocol,
    EmailServiceNotConfiguredError,
    InvalidInputError,
    NoMailingListError,
    NoRecipientsError,
    WorkflowNotFoundError,
)
from .templating import (
    CAMPAIGN_PLACEHOLDERS,
    WORKFLOW_PLACEHOLDERS,
    WORKFLOW_TEST_DEFAULTS,
    render_template,
)

logger = logging.getLogger(__name__)


class CampaignService:
    """Campaign service business logic layer"""

    DEFAULT_BATCH_SIZE = 50
    DEFAULT_BATCH_DELAY_SECONDS = 1.0
    MAX_REPORTED_ERRORS = 10

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        email_client: Optional[EmailClientProtocol] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        from_address: Optional[str] = None,
    ):
        self.repository = repository
        self.email_client = email_client
        self.batch_size = max(1, batch_size)
        self.batch_delay_seconds = max(0.0, batch_delay_seconds)
        self.from_address = from_address

    def _require_email_client(self) -> EmailClientProtocol:
        if self.email_client is None:
            logger.error("RESEND_API_KEY not configured")
            raise EmailServiceNotConfiguredError()
        return self.email_client

    # ====================
    # Campaign dispatch
    # ====================

    async def send_campaign(self, auth: AuthContext, campaign_id: str) -> CampaignSendResponse:
        """
        Send a draft campaign to every subscribed member of its mailing list.

        The campaign is claimed with a conditional draft -> sending update, so
        concurrent requests for the same campaign dispatch it at most once.
        Recipients are sent in concurrent batches; one recipient's failure
        never affects another's.

        Raises:
            EmailServiceNotConfiguredError: no provider API key
            CampaignNotFoundError: unknown campaign
            AuthorizationError: caller may not manage the organization's email
            CampaignAlreadyDispatchedError: campaign is not a draft
            NoMailingListError / NoRecipientsError: nothing to send to
        """
        self._require_email_client()

        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            raise CampaignNotFoundError()

        auth.require_access(campaign.organization_id, "Not authorized to send this campaign")

        if campaign.status != CampaignStatus.DRAFT:
            raise CampaignAlreadyDispatchedError(campaign.status)

        if not campaign.mailing_list_id:
            raise NoMailingListError()

        recipients = await self.repository.get_subscribed_recipients(campaign.mailing_list_id)
        if not recipients:
            raise NoRecipientsError()

        if not await self.repository.claim_for_sending(campaign.id, len(recipients)):
            current = await self.repository.get_campaign(campaign.id)
            raise CampaignAlreadyDispatchedError(current.status if current else None)

        logger.info(
            f"Starting campaign send: campaign={campaign.id} name={campaign.name!r} "
            f"organization={campaign.organization_id} recipients={len(recipients)} "
            f"at={datetime.now(timezone.utc).isoformat()}"
        )

        try:
            stats, errors = await self._dispatch(campaign, recipients)
        except Exception as e:
            logger.error(f"Campaign send error for {campaign.id}: {e}", exc_info=True)
            await self._mark_failed(campaign.id)
            raise

        try:
            await self.repository.complete_campaign(
                campaign.id,
                delivered_count=stats.delivered,
                bounced_count=stats.failed,
                sent_at=datetime.now(timezone.utc),
            )
        except Exception as e:
            # Messages are already out; report the dispatch as done
            logger.error(f"Error updating final status of campaign {campaign.id}: {e}")

        logger.info(
            f"Campaign send completed: campaign={campaign.id} sent={stats.sent} "
            f"delivered={stats.delivered} failed={stats.failed} "
            f"at={datetime.now(timezone.utc).isoformat()}"
        )

        return CampaignSendResponse(
            success=True,
            message="Campaign sent successfully",
            stats=stats,
            errors=errors[: self.MAX_REPORTED_ERRORS] or None,
        )

    async def _dispatch(
        self, campaign: Campaign, recipients: List[Subscriber]
    ) -> Tuple[DispatchStats, List[RecipientError]]:
        stats = DispatchStats(total=len(recipients))
        errors: List[RecipientError] = []

        for start in range(0, len(recipients), self.batch_size):
            batch = recipients[start:start + self.batch_size]
            outcomes = await asyncio.gather(
                *(self._send_to_recipient(campaign, recipient) for recipient in batch),
                return_exceptions=True,
            )

            for recipient, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    outcome = RecipientResult(
                        email=recipient.email,
                        success=False,
                        error=str(outcome) or type(outcome).__name__,
                    )
                if outcome.success:
                    stats.sent += 1
                    stats.delivered += 1
                else:
                    stats.failed += 1
                    errors.append(RecipientError(email=outcome.email, error=outcome.error or "Unknown error"))

            if start + self.batch_size < len(recipients) and self.batch_delay_seconds > 0:
                await asyncio.sleep(self.batch_delay_seconds)

        return stats, errors

    async def _send_to_recipient(self, campaign: Campaign, recipient: Subscriber) -> RecipientResult:
        values = {
            "first_name": recipient.first_name,
            "last_name": recipient.last_name,
            "email": recipient.email,
        }
        try:
            message_id = await self.email_client.send_email(
                to=recipient.email,
                subject=render_template(campaign.subject, values, CAMPAIGN_PLACEHOLDERS),
                html=render_template(campaign.content, values, CAMPAIGN_PLACEHOLDERS),
                from_address=self.from_address,
            )
            return RecipientResult(email=recipient.email, success=True, message_id=message_id)
        except Exception as e:
            return RecipientResult(email=recipient.email, success=False, error=str(e) or type(e).__name__)

    async def _mark_failed(self, campaign_id: str) -> None:
        try:
            await self.repository.update_status(campaign_id, CampaignStatus.FAILED)
        except Exception as e:
            logger.error(f"Failed to update campaign status for {campaign_id}: {e}")

    # ====================
    # Workflow emails
    # ====================

    async def send_workflow_email(
        self, auth: AuthContext, request: WorkflowEmailRequest
    ) -> WorkflowEmailResponse:
        """Send one message on behalf of an organization's email workflow"""
        if not request.html_body and not request.text_body:
            raise InvalidInputError("Missing required fields: to, subject, and html_body or text_body")

        to = request.to.strip()
        if not validate_email(to):
            raise InvalidInputError("Invalid email address format")

        auth.require_access(request.organization_id, "Not authorized for this organization")
        email_client = self._require_email_client()

        logger.info(
            f"Email send request: workflow={request.workflow_id} organization={request.organization_id} "
            f"to={to} user={auth.user_id} at={datetime.now(timezone.utc).isoformat()}"
        )

        message_id = await email_client.send_email(
            to=to,
            subject=request.subject,
            html=request.html_body or request.text_body,
            from_address=self.from_address,
            text=request.text_body,
            reply_to=f"{request.recipient_name} <{to}>" if request.recipient_name else None,
        )

        logger.info(f"Email sent successfully: id={message_id} workflow={request.workflow_id}")
        return WorkflowEmailResponse(success=True, email_id=message_id)

    async def send_workflow_test(
        self, auth: AuthContext, request: WorkflowTestRequest
    ) -> WorkflowTestResponse:
        """
        Render a workflow with sample member data and send it to a test address.

        Sample values missing from the request fall back to John / Doe /
        test@example.com / Adult.
        """
        test_email = request.test_email.strip()
        if not validate_email(test_email):
            raise InvalidInputError("Invalid email address format")

        email_client = self._require_email_client()

        workflow = await self.repository.get_workflow(request.workflow_id)
        if not workflow:
            raise WorkflowNotFoundError()

        auth.require_access(workflow.organization_id, "Not authorized to test this workflow")

        supplied = request.test_data.model_dump() if request.test_data else {}
        values = {name: supplied.get(name) or default for name, default in WORKFLOW_TEST_DEFAULTS.items()}

        message_id = await email_client.send_email(
            to=test_email,
            subject=render_template(workflow.email_subject, values, WORKFLOW_PLACEHOLDERS),
            html=render_template(workflow.email_template, values, WORKFLOW_PLACEHOLDERS),
            from_address=self.from_address,
        )

        logger.info(
            f"Test email sent: workflow={workflow.id} to={test_email} id={message_id} "
            f"at={datetime.now(timezone.utc).isoformat()}"
        )
        return WorkflowTestResponse(success=True, message="Test email sent successfully", email_id=message_id)


__all__ = ["CampaignService"]
