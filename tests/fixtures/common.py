"""
Common/Shared Fixtures

Base factories and generators used across multiple services.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional


def make_user_id() -> str:
    """Generate a unique auth user ID"""
    return str(uuid.uuid4())


def make_profile_id() -> str:
    """Generate a unique profile ID"""
    return str(uuid.uuid4())


def make_org_id() -> str:
    """Generate a unique organization ID"""
    return str(uuid.uuid4())


def make_email(prefix: Optional[str] = None) -> str:
    """Generate a unique email"""
    prefix = prefix or f"test_{uuid.uuid4().hex[:8]}"
    return f"{prefix}@example.com"


def make_timestamp() -> datetime:
    """Generate current UTC timestamp"""
    return datetime.now(timezone.utc)
