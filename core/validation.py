"""
Input validation helpers shared by the services
"""

import re
from typing import Any

MAX_DOMAIN_LENGTH = 255

# Dot-separated labels of 1-63 alphanumerics/hyphens, no leading or trailing hyphen
_DOMAIN_RE = re.compile(
    r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$"
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def canonicalize_domain(value: str) -> str:
    """Trimmed, lower-cased form used for storage, comparison and DNS lookups"""
    return value.strip().lower()


def validate_domain(value: Any) -> bool:
    """True when value is a syntactically valid domain name (after canonicalization)"""
    if not isinstance(value, str):
        return False
    domain = canonicalize_domain(value)
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    return _DOMAIN_RE.match(domain) is not None


def validate_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return _EMAIL_RE.match(value.strip()) is not None


__all__ = ["canonicalize_domain", "validate_domain", "validate_email", "MAX_DOMAIN_LENGTH"]
