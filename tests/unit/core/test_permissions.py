"""
Unit Tests for committee permission aggregation and the organization access rule
"""

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.auth_dependencies import AuthorizationError
from core.permissions import Permission, aggregate_permissions, has_permission, is_admin
from tests.fixtures import make_admin_context, make_auth_context, make_org_id, make_super_admin_context


class TestAggregatePermissions:
    """Effective permissions of a member"""

    @pytest.mark.parametrize("role", ["admin", "super_admin"])
    def test_admins_get_full_admin_only(self, role):
        result = aggregate_permissions(role, [["manage_events"]])
        assert result == frozenset({"full_admin"})

    def test_union_of_positions(self):
        result = aggregate_permissions(
            "member",
            [["manage_emails", "view_reports"], ["view_reports", "manage_domains"]],
        )
        assert result == frozenset({"manage_emails", "view_reports", "manage_domains"})

    def test_null_positions_contribute_nothing(self):
        assert aggregate_permissions("member", [None, [], ["manage_events"]]) == frozenset({"manage_events"})

    def test_no_positions(self):
        assert aggregate_permissions("member", []) == frozenset()


class TestPermissionChecks:
    """has_permission / is_admin"""

    def test_full_admin_permission_grants_everything(self):
        assert has_permission("member", {"full_admin"}, Permission.MANAGE_DOMAINS) is True
        assert is_admin("member", {"full_admin"}) is True

    def test_specific_permission(self):
        assert has_permission("member", {"manage_emails"}, "manage_emails") is True
        assert has_permission("member", {"manage_emails"}, "manage_domains") is False

    def test_admin_role(self):
        assert has_permission("admin", set(), "anything") is True


class TestOrganizationAccessRule:
    """AuthContext.can_manage / require_access"""

    def test_super_admin_any_organization(self):
        assert make_super_admin_context().can_manage(make_org_id()) is True

    def test_admin_own_organization(self):
        org_id = make_org_id()
        assert make_admin_context(org_id).can_manage(org_id) is True

    def test_admin_other_organization(self):
        assert make_admin_context().can_manage(make_org_id()) is False

    @pytest.mark.parametrize("permissions", [["manage_domains"], ["manage_emails"], ["full_admin"]])
    def test_member_with_permission(self, permissions):
        org_id = make_org_id()
        auth = make_auth_context(organization_id=org_id, permissions=permissions)
        assert auth.can_manage(org_id) is False
        with pytest.raises(AuthorizationError):
            auth.require_access(org_id)

    def test_member_without_permission(self):
        org_id = make_org_id()
        assert make_auth_context(organization_id=org_id).can_manage(org_id) is False

    def test_missing_target_organization(self):
        assert make_admin_context().can_manage(None) is False

    def test_require_access_raises_forbidden(self):
        auth = make_admin_context()
        with pytest.raises(AuthorizationError) as exc_info:
            auth.require_access(make_org_id(), "Not authorized for this domain")
        assert str(exc_info.value) == "Not authorized for this domain"

    def test_context_is_immutable(self):
        auth = make_auth_context()
        with pytest.raises(Exception):
            auth.role = "super_admin"
