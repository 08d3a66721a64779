"""
Domain Service Data Models

Pydantic models for custom domain records and the HTTP API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class VerificationStatus(str, Enum):
    """Verification state of a custom domain"""
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"


# ====================
# Core Models
# ====================

class DomainRecord(BaseModel):
    """A custom domain registered by an organization"""
    id: str
    organization_id: str
    domain: str
    verification_token: str
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    verified_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DnsRecordInstruction(BaseModel):
    """DNS record the organization has to publish"""
    name: str
    type: str = "TXT"
    value: str


class VerificationResult(BaseModel):
    """Outcome of a verification attempt"""
    verified: bool
    message: str
    already_verified: Optional[bool] = None
    found: Optional[List[str]] = None
    expected: Optional[str] = None
    dns_error: Optional[str] = None


# ====================
# Request Models
# ====================

class DomainRegisterRequest(BaseModel):
    """Request to register a custom domain"""
    domain: str = Field(..., max_length=512)
    organization_id: str = Field(..., min_length=1)


class DomainVerifyRequest(BaseModel):
    """Request to verify a registered domain"""
    domain_id: str = Field(..., min_length=1)


class CertificateRequest(BaseModel):
    """Request to issue a certificate for a verified domain"""
    domain: str = Field(..., max_length=512)


# ====================
# Response Models
# ====================

class DomainRegisterResponse(BaseModel):
    """Registered domain with the DNS record to publish"""
    domain: DomainRecord
    dns_record: DnsRecordInstruction


class DomainListResponse(BaseModel):
    """Domains of an organization"""
    domains: List[DomainRecord] = Field(default_factory=list)
    total: int = 0


class CertificateResponse(BaseModel):
    """Certificate issuance result"""
    success: bool
    message: str
    domain: str


# Each lookup is either the list of values or {"error": <code>}
DnsLookupOutcome = Union[List[str], Dict[str, str]]


class DnsCheckResponse(BaseModel):
    """Current DNS configuration of a domain"""
    domain: str
    timestamp: datetime
    a_records: DnsLookupOutcome
    cname_records: DnsLookupOutcome
    verification_record: DnsLookupOutcome


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
    "VerificationStatus",
    "DomainRecord",
    "DnsRecordInstruction",
    "VerificationResult",
    "DomainRegisterRequest",
    "DomainVerifyRequest",
    "CertificateRequest",
    "DomainRegisterResponse",
    "DomainListResponse",
    "CertificateResponse",
    "DnsLookupOutcome",
    "DnsCheckResponse",
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
]
