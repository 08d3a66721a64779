"""
Domain Service Business Logic

Implements custom domain registration, DNS ownership verification,
certificate issuance and DNS diagnostics.
"""

import asyncio
import logging
import secrets
from datetime import datetime, timezone
from typing import Awaitable, List, Optional

from core.auth_dependencies import AuthContext
from core.validation import canonicalize_domain, validate_domain

from .models import (
    CertificateResponse,
    DnsCheckResponse,
    DnsLookupOutcome,
    DnsRecordInstruction,
    DomainListResponse,
    DomainRecord,
    DomainRegisterResponse,
    VerificationResult,
    VerificationStatus,
)
from .protocols import (
    CertificateIssuanceError,
    CertificateIssuerProtocol,
    DnsLookupError,
    DnsResolverProtocol,
    DomainAlreadyRegisteredError,
    DomainNotFoundError,
    DomainNotVerifiedError,
    DomainRepositoryProtocol,
    EnvironmentNotSupportedError,
    InvalidDomainFormatError,
    OrganizationRequiredError,
)

logger = logging.getLogger(__name__)


class DomainService:
    """Domain service business logic layer"""

    VERIFICATION_PREFIX = "_verification"
    TOKEN_BYTES = 16  # 32 hex characters

    def __init__(
        self,
        repository: DomainRepositoryProtocol,
        dns_resolver: DnsResolverProtocol,
        certificate_issuer: CertificateIssuerProtocol,
        environment: str = "development",
    ):
        self.repository = repository
        self.dns_resolver = dns_resolver
        self.certificate_issuer = certificate_issuer
        self.environment = environment

    @classmethod
    def verification_name(cls, domain: str) -> str:
        """Name of the TXT record that proves ownership of domain"""
        return f"{cls.VERIFICATION_PREFIX}.{domain}"

    def _canonical(self, domain: str) -> str:
        if not validate_domain(domain):
            raise InvalidDomainFormatError()
        return canonicalize_domain(domain)

    # ====================
    # Registration
    # ====================

    async def register_domain(
        self, auth: AuthContext, domain: str, organization_id: str
    ) -> DomainRegisterResponse:
        """
        Register a custom domain for an organization.

        The record starts unverified with a fresh random token; the response
        carries the TXT record the organization has to publish.
        """
        canonical = self._canonical(domain)
        auth.require_access(organization_id, "Not authorized for this organization")

        if await self.repository.get_domain_by_name(canonical):
            raise DomainAlreadyRegisteredError(canonical)

        token = secrets.token_hex(self.TOKEN_BYTES)
        record = await self.repository.create_domain(organization_id, canonical, token)
        logger.info(f"Domain {canonical} registered for organization {organization_id} by {auth.user_id}")

        return DomainRegisterResponse(
            domain=record,
            dns_record=DnsRecordInstruction(
                name=self.verification_name(canonical),
                type="TXT",
                value=token,
            ),
        )

    async def list_domains(self, auth: AuthContext, organization_id: str) -> DomainListResponse:
        auth.require_access(organization_id, "Not authorized for this organization")
        domains = await self.repository.list_domains(organization_id)
        return DomainListResponse(domains=domains, total=len(domains))

    # ====================
    # Verification
    # ====================

    async def verify_domain(self, auth: AuthContext, domain_id: str) -> VerificationResult:
        """
        Check the _verification TXT record of a domain against its stored token.

        A verified record short-circuits without any DNS lookup. A missing
        record, a resolver error or a mismatching value marks the domain
        failed; the caller still gets a structured result, not an error.

        Raises:
            DomainNotFoundError: no record with this id
            AuthorizationError: caller may not manage the owning organization
        """
        record = await self.repository.get_domain_by_id(domain_id)
        if not record:
            raise DomainNotFoundError()

        auth.require_access(record.organization_id, "Not authorized for this domain")

        if record.verification_status == VerificationStatus.VERIFIED:
            return VerificationResult(
                verified=True,
                message="Domain already verified",
                already_verified=True,
            )

        name = self.verification_name(canonicalize_domain(record.domain))
        checked_at = datetime.now(timezone.utc)

        try:
            txt_records = await self.dns_resolver.resolve_txt(name)
        except DnsLookupError as e:
            await self._mark_failed(record, checked_at)
            logger.info(f"Verification of {record.domain} ({record.id}) failed: DNS error {e.code}")
            return VerificationResult(
                verified=False,
                message="TXT record not found. Please add the verification record to your DNS.",
                expected=record.verification_token,
                dns_error=e.code,
            )

        if record.verification_token in txt_records:
            await self.repository.mark_verified(record.id, checked_at)
            logger.info(f"Domain {record.domain} ({record.id}) verified at {checked_at.isoformat()}")
            return VerificationResult(
                verified=True,
                message="Domain ownership verified successfully and saved",
            )

        await self._mark_failed(record, checked_at)
        logger.info(f"Verification of {record.domain} ({record.id}) failed: token not in {len(txt_records)} TXT value(s)")
        return VerificationResult(
            verified=False,
            message="Verification token not found in DNS TXT records",
            found=txt_records,
            expected=record.verification_token,
        )

    async def _mark_failed(self, record: DomainRecord, checked_at: datetime) -> None:
        if not await self.repository.mark_failed(record.id, checked_at):
            logger.info(f"Domain {record.domain} ({record.id}) was verified concurrently; keeping verified")

    # ====================
    # Certificates
    # ====================

    async def generate_certificate(self, auth: AuthContext, domain: str) -> CertificateResponse:
        """
        Issue a TLS certificate for a verified domain and reload the proxy.

        Only available in production. Issuance failures leave the
        verification status untouched.
        """
        canonical = self._canonical(domain)
        record = await self.repository.get_domain_by_name(canonical)
        if not record:
            raise DomainNotFoundError()

        auth.require_access(record.organization_id, "Not authorized for this domain")

        if self.environment != "production":
            raise EnvironmentNotSupportedError()

        if record.verification_status != VerificationStatus.VERIFIED:
            raise DomainNotVerifiedError()

        logger.info(
            f"SSL certificate generation requested: domain={canonical} "
            f"organization={record.organization_id} user={auth.user_id} "
            f"at={datetime.now(timezone.utc).isoformat()}"
        )

        try:
            await self.certificate_issuer.issue_certificate(canonical)
        except CertificateIssuanceError as e:
            logger.error(f"Certificate issuance for {canonical} failed: {e}")
            raise

        return CertificateResponse(
            success=True,
            message="SSL certificate generated and nginx reloaded",
            domain=canonical,
        )

    # ====================
    # Diagnostics
    # ====================

    async def check_dns(
        self, auth: AuthContext, domain: str, organization_id: Optional[str] = None
    ) -> DnsCheckResponse:
        """
        Report A, CNAME and verification TXT records of a domain.

        Lookups run concurrently and fail independently. Unregistered
        domains need an organization to authorize against.
        """
        canonical = self._canonical(domain)
        record = await self.repository.get_domain_by_name(canonical)
        if record:
            auth.require_access(record.organization_id, "Not authorized for this domain")
        else:
            if not organization_id:
                raise OrganizationRequiredError()
            auth.require_access(organization_id, "Not authorized for this organization")

        a_records, cname_records, verification_record = await asyncio.gather(
            self._lookup(self.dns_resolver.resolve_a(canonical)),
            self._lookup(self.dns_resolver.resolve_cname(canonical)),
            self._lookup(self.dns_resolver.resolve_txt(self.verification_name(canonical))),
        )

        return DnsCheckResponse(
            domain=canonical,
            timestamp=datetime.now(timezone.utc),
            a_records=a_records,
            cname_records=cname_records,
            verification_record=verification_record,
        )

    async def _lookup(self, lookup: Awaitable[List[str]]) -> DnsLookupOutcome:
        try:
            return await lookup
        except DnsLookupError as e:
            return {"error": e.code}


__all__ = ["DomainService"]
