"""
Committee-based permissions

Admins get full access; every other member gets the union of the
permissions attached to the committee positions they hold.
"""

from enum import Enum
from typing import FrozenSet, Iterable, Optional


class Permission(str, Enum):
    """Permissions a committee position can grant"""
    APPROVE_MEMBERS = "approve_members"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_MEMBERSHIPS = "manage_memberships"
    VIEW_REPORTS = "view_reports"
    EXPORT_REPORTS = "export_reports"
    MANAGE_EVENTS = "manage_events"
    MANAGE_EMAILS = "manage_emails"
    MANAGE_MAILING_LISTS = "manage_mailing_lists"
    MANAGE_COMMITTEES = "manage_committees"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_DOMAINS = "manage_domains"
    FULL_ADMIN = "full_admin"


ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ADMIN_ROLES = frozenset({ROLE_ADMIN, ROLE_SUPER_ADMIN})


def aggregate_permissions(
    role: Optional[str],
    position_permissions: Iterable[Optional[Iterable[str]]],
) -> FrozenSet[str]:
    """
    Build the effective permission set of a member.

    Args:
        role: Profile role
        position_permissions: Permission lists of each committee position held
            (None entries contribute nothing)

    Returns:
        Frozen set of permission names
    """
    if role in ADMIN_ROLES:
        return frozenset({Permission.FULL_ADMIN.value})

    permissions = set()
    for entry in position_permissions:
        if entry:
            permissions.update(str(p) for p in entry)
    return frozenset(permissions)


def is_admin(role: Optional[str], permissions: Iterable[str]) -> bool:
    return role in ADMIN_ROLES or Permission.FULL_ADMIN.value in set(permissions)


def has_permission(role: Optional[str], permissions: Iterable[str], permission: str) -> bool:
    permission = permission.value if isinstance(permission, Permission) else permission
    permissions = set(permissions)
    if is_admin(role, permissions):
        return True
    return permission in permissions


__all__ = [
    "Permission",
    "ROLE_SUPER_ADMIN",
    "ROLE_ADMIN",
    "ADMIN_ROLES",
    "aggregate_permissions",
    "is_admin",
    "has_permission",
]
