"""
Workflow Email Component Tests

Single workflow sends and workflow test sends with sample data.
"""

import pytest

from core.auth_dependencies import AuthorizationError
from microservices.campaign_service.protocols import (
    EmailDeliveryError,
    EmailServiceNotConfiguredError,
    InvalidInputError,
    WorkflowNotFoundError,
)
from tests.fixtures import make_admin_context, make_auth_context, make_org_id

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


class TestSendWorkflowEmail:

    async def test_sends_html(self, campaign_service, campaign_factory, email_client):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id, to=" new.member@example.com ")

        result = await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert result.success is True
        assert result.email_id == "msg_1"
        message = email_client.sent[0]
        assert message["to"] == "new.member@example.com"
        assert message["html"] == "<p>Welcome aboard</p>"
        assert message["reply_to"] is None

    async def test_text_only_body_used_as_html(self, campaign_service, campaign_factory, email_client):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id, html_body=None, text_body="Welcome aboard")

        await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert email_client.sent[0]["html"] == "Welcome aboard"
        assert email_client.sent[0]["text"] == "Welcome aboard"

    async def test_recipient_name_sets_reply_to(self, campaign_service, campaign_factory, email_client):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(
            org_id, to="jane@example.com", recipient_name="Jane Smith"
        )

        await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert email_client.sent[0]["reply_to"] == "Jane Smith <jane@example.com>"

    async def test_missing_body(self, campaign_service, campaign_factory, email_client):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id, html_body=None, text_body=None)

        with pytest.raises(InvalidInputError):
            await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert email_client.sent == []

    @pytest.mark.parametrize("address", ["not-an-email", "jane@", "jane smith@example.com"])
    async def test_invalid_address(self, campaign_service, campaign_factory, address):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id, to=address)

        with pytest.raises(InvalidInputError) as exc_info:
            await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert str(exc_info.value) == "Invalid email address format"

    async def test_other_organization_forbidden(self, campaign_service, campaign_factory, email_client):
        request = campaign_factory.make_workflow_email_request(make_org_id())

        with pytest.raises(AuthorizationError):
            await campaign_service.send_workflow_email(make_admin_context(), request)

        assert email_client.sent == []

    async def test_member_without_permission_forbidden(self, campaign_service, campaign_factory):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id)

        with pytest.raises(AuthorizationError):
            await campaign_service.send_workflow_email(make_auth_context(organization_id=org_id), request)

    async def test_provider_error_propagates(self, campaign_service, campaign_factory, email_client):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id, to="bounce@example.com")
        email_client.fail("bounce@example.com", "The recipient is suppressed", status_code=422)

        with pytest.raises(EmailDeliveryError) as exc_info:
            await campaign_service.send_workflow_email(make_admin_context(org_id), request)

        assert exc_info.value.status_code == 422

    async def test_provider_not_configured(self, unconfigured_campaign_service, campaign_factory):
        org_id = make_org_id()
        request = campaign_factory.make_workflow_email_request(org_id)

        with pytest.raises(EmailServiceNotConfiguredError):
            await unconfigured_campaign_service.send_workflow_email(make_admin_context(org_id), request)


class TestSendWorkflowTest:

    async def test_defaults_fill_missing_sample_values(
        self, campaign_service, campaign_factory, campaign_repository, email_client
    ):
        workflow = campaign_repository.add_workflow(campaign_factory.make_workflow())
        request = campaign_factory.make_workflow_test_request(workflow.id)

        result = await campaign_service.send_workflow_test(make_admin_context(workflow.organization_id), request)

        assert result.success is True
        assert result.message == "Test email sent successfully"
        message = email_client.sent[0]
        assert message["to"] == "tester@example.com"
        assert message["subject"] == "Welcome John"
        assert message["html"] == "<p>Hello John Doe (test@example.com), your Adult membership is active.</p>"

    async def test_supplied_values_win(self, campaign_service, campaign_factory, campaign_repository, email_client):
        workflow = campaign_repository.add_workflow(campaign_factory.make_workflow())
        request = campaign_factory.make_workflow_test_request(
            workflow.id, test_data={"first_name": "Maria", "membership_type": "Family", "last_name": ""}
        )

        await campaign_service.send_workflow_test(make_admin_context(workflow.organization_id), request)

        assert email_client.sent[0]["html"] == (
            "<p>Hello Maria Doe (test@example.com), your Family membership is active.</p>"
        )

    async def test_unknown_workflow(self, campaign_service, campaign_factory):
        request = campaign_factory.make_workflow_test_request(campaign_factory.make_id())

        with pytest.raises(WorkflowNotFoundError):
            await campaign_service.send_workflow_test(make_admin_context(), request)

    async def test_other_organization_forbidden(
        self, campaign_service, campaign_factory, campaign_repository, email_client
    ):
        workflow = campaign_repository.add_workflow(campaign_factory.make_workflow())
        request = campaign_factory.make_workflow_test_request(workflow.id)

        with pytest.raises(AuthorizationError):
            await campaign_service.send_workflow_test(make_admin_context(), request)

        assert email_client.sent == []

    async def test_invalid_test_address(self, campaign_service, campaign_factory, campaign_repository):
        workflow = campaign_repository.add_workflow(campaign_factory.make_workflow())
        request = campaign_factory.make_workflow_test_request(workflow.id, test_email="tester")

        with pytest.raises(InvalidInputError):
            await campaign_service.send_workflow_test(make_admin_context(workflow.organization_id), request)
