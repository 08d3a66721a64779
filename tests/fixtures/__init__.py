"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Base ID generators, timestamps
    - auth_fixtures.py: AuthContext and bearer token factories
    - fake_db.py: PostgresClient stand-in for repository tests
"""

# Common utilities
from .common import (
    make_user_id,
    make_profile_id,
    make_org_id,
    make_email,
    make_timestamp,
)

# Auth fixtures
from .auth_fixtures import (
    TEST_JWT_SECRET,
    make_auth_context,
    make_admin_context,
    make_super_admin_context,
    make_jwt_manager,
    make_bearer_token,
)

# Database stand-in
from .fake_db import FakeDb

__all__ = [
    "FakeDb",
    "make_user_id",
    "make_profile_id",
    "make_org_id",
    "make_email",
    "make_timestamp",
    "TEST_JWT_SECRET",
    "make_auth_context",
    "make_admin_context",
    "make_super_admin_context",
    "make_jwt_manager",
    "make_bearer_token",
]
