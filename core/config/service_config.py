#!/usr/bin/env python3
"""Configuration for the external services the platform talks to

- Supabase Auth (JWT verification)
- Resend (transactional / campaign email)
- DNS resolution and certificate issuance for custom domains
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default

def _command(val: Optional[str], default: List[str]) -> List[str]:
    # Commands are configured as whitespace separated argv, never run through a shell
    return val.split() if val else list(default)


@dataclass
class AuthConfig:
    """Supabase Auth token verification"""
    jwt_secret: Optional[str] = None
    jwt_audience: str = "authenticated"
    jwt_algorithm: str = "HS256"

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            jwt_secret=os.getenv("SUPABASE_JWT_SECRET") or os.getenv("JWT_SECRET") or None,
            jwt_audience=os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated"),
            jwt_algorithm=os.getenv("SUPABASE_JWT_ALGORITHM", "HS256"),
        )


@dataclass
class EmailConfig:
    """Resend provider and campaign pacing"""
    resend_api_key: Optional[str] = None
    resend_base_url: str = "https://api.resend.com"
    from_address: str = "noreply@example.org"
    timeout_seconds: float = 30.0

    # Campaign dispatch pacing
    campaign_batch_size: int = 50
    campaign_batch_delay_seconds: float = 1.0

    @property
    def enabled(self) -> bool:
        return bool(self.resend_api_key)

    @classmethod
    def from_env(cls) -> 'EmailConfig':
        return cls(
            resend_api_key=os.getenv("RESEND_API_KEY") or None,
            resend_base_url=os.getenv("RESEND_BASE_URL", "https://api.resend.com"),
            from_address=os.getenv("EMAIL_FROM_ADDRESS", "noreply@example.org"),
            timeout_seconds=_float(os.getenv("EMAIL_TIMEOUT_SECONDS", "30"), 30.0),
            campaign_batch_size=max(1, _int(os.getenv("CAMPAIGN_BATCH_SIZE", "50"), 50)),
            campaign_batch_delay_seconds=max(
                0.0, _float(os.getenv("CAMPAIGN_BATCH_DELAY_SECONDS", "1.0"), 1.0)
            ),
        )


@dataclass
class DomainConfig:
    """Custom domain verification and certificate issuance"""
    dns_timeout_seconds: float = 5.0
    certbot_command: List[str] = field(default_factory=lambda: ["sudo", "certbot"])
    proxy_reload_command: List[str] = field(default_factory=lambda: ["sudo", "nginx", "-s", "reload"])
    certbot_email_local_part: str = "admin"
    certbot_timeout_seconds: float = 300.0

    @classmethod
    def from_env(cls) -> 'DomainConfig':
        return cls(
            dns_timeout_seconds=_float(os.getenv("DNS_TIMEOUT_SECONDS", "5"), 5.0),
            certbot_command=_command(os.getenv("CERTBOT_COMMAND"), ["sudo", "certbot"]),
            proxy_reload_command=_command(
                os.getenv("PROXY_RELOAD_COMMAND"), ["sudo", "nginx", "-s", "reload"]
            ),
            certbot_email_local_part=os.getenv("CERTBOT_EMAIL_LOCAL_PART", "admin"),
            certbot_timeout_seconds=_float(os.getenv("CERTBOT_TIMEOUT_SECONDS", "300"), 300.0),
        )
