"""
Domain Service Protocols

Defines interfaces for dependency injection and testing,
plus the exceptions the service raises.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from .models import DomainRecord


# ====================
# Repository Protocol
# ====================


class DomainRepositoryProtocol(Protocol):
    """Protocol for domain data repository"""

    async def health_check(self) -> bool:
        """Check repository health"""
        ...

    async def get_domain_by_id(self, domain_id: str) -> Optional[DomainRecord]:
        """Get domain record by ID"""
        ...

    async def get_domain_by_name(self, domain: str) -> Optional[DomainRecord]:
        """Get domain record by canonical name"""
        ...

    async def list_domains(self, organization_id: str) -> List[DomainRecord]:
        """List domains of an organization, oldest first"""
        ...

    async def create_domain(
        self, organization_id: str, domain: str, verification_token: str
    ) -> DomainRecord:
        """Insert an unverified domain record"""
        ...

    async def mark_verified(self, domain_id: str, checked_at: datetime) -> None:
        """Set status verified, verified_at and last_checked_at"""
        ...

    async def mark_failed(self, domain_id: str, checked_at: datetime) -> bool:
        """Set status failed and last_checked_at; never overwrites verified. False if skipped"""
        ...


# ====================
# Collaborator Protocols
# ====================


class DnsResolverProtocol(Protocol):
    """DNS lookups; failures raise DnsLookupError"""

    async def resolve_txt(self, name: str) -> List[str]:
        ...

    async def resolve_a(self, name: str) -> List[str]:
        ...

    async def resolve_cname(self, name: str) -> List[str]:
        ...


class CertificateIssuerProtocol(Protocol):
    """Certificate tool; failures raise CertificateIssuanceError"""

    async def issue_certificate(self, domain: str) -> str:
        """Issue a certificate and reload the proxy, returning the tool output"""
        ...


# ====================
# Exceptions
# ====================


class DomainServiceError(Exception):
    """Base exception for domain service errors"""
    pass


class InvalidInputError(DomainServiceError):
    """Raised when a request cannot be processed as given"""
    pass


class InvalidDomainFormatError(InvalidInputError):
    """Raised when a domain name fails syntax validation"""

    def __init__(self, message: str = "Invalid domain format"):
        super().__init__(message)


class OrganizationRequiredError(InvalidInputError):
    """Raised when an unregistered domain is checked without an organization"""

    def __init__(self, message: str = "Organization ID required for new domains"):
        super().__init__(message)


class DomainNotVerifiedError(InvalidInputError):
    """Raised when a certificate is requested for an unverified domain"""

    def __init__(self, message: str = "Domain must be verified before generating SSL certificate"):
        super().__init__(message)


class EnvironmentNotSupportedError(InvalidInputError):
    """Raised when certificate issuance is requested outside production"""

    def __init__(self, message: str = "SSL generation only available in production environment"):
        super().__init__(message)


class DomainNotFoundError(DomainServiceError):
    """Raised when a domain record does not exist"""

    def __init__(self, message: str = "Domain record not found"):
        super().__init__(message)


class DomainAlreadyRegisteredError(DomainServiceError):
    """Raised when a canonical domain name is already taken"""

    def __init__(self, domain: str):
        super().__init__(f"Domain {domain} is already registered")
        self.domain = domain


class DnsLookupError(DomainServiceError):
    """Raised by the resolver; code is NXDOMAIN, NODATA, TIMEOUT, NONAMESERVERS or ERROR"""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or f"DNS lookup failed: {code}")
        self.code = code


class CertificateIssuanceError(DomainServiceError):
    """Raised when the certificate tool or proxy reload fails"""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


__all__ = [
    "DomainRepositoryProtocol",
    "DnsResolverProtocol",
    "CertificateIssuerProtocol",
    "DomainServiceError",
    "InvalidInputError",
    "InvalidDomainFormatError",
    "OrganizationRequiredError",
    "DomainNotVerifiedError",
    "EnvironmentNotSupportedError",
    "DomainNotFoundError",
    "DomainAlreadyRegisteredError",
    "DnsLookupError",
    "CertificateIssuanceError",
]
