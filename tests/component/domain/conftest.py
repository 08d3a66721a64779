"""
Domain Service Component Test Configuration

In-memory replacements for the repository, the DNS resolver and the
certificate tool, plus a DomainService wired to them.
"""
import os
import sys
from datetime import datetime
from typing import Dict, List, Optional

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.domain_service.domain_service import DomainService
from microservices.domain_service.models import DomainRecord, VerificationStatus
from microservices.domain_service.protocols import (
    CertificateIssuanceError,
    DnsLookupError,
    DomainAlreadyRegisteredError,
)
from tests.contracts.domain.data_contract import DomainTestDataFactory


class MockDomainRepository:
    """Dict-backed domain repository with a call log"""

    def __init__(self):
        self.records: Dict[str, DomainRecord] = {}
        self.calls: List[tuple] = []

    def add(self, record: DomainRecord) -> DomainRecord:
        self.records[record.id] = record
        return record

    async def health_check(self) -> bool:
        return True

    async def get_domain_by_id(self, domain_id: str) -> Optional[DomainRecord]:
        self.calls.append(("get_domain_by_id", domain_id))
        return self.records.get(domain_id)

    async def get_domain_by_name(self, domain: str) -> Optional[DomainRecord]:
        self.calls.append(("get_domain_by_name", domain))
        for record in self.records.values():
            if record.domain == domain:
                return record
        return None

    async def list_domains(self, organization_id: str) -> List[DomainRecord]:
        return sorted(
            (r for r in self.records.values() if r.organization_id == organization_id),
            key=lambda r: r.created_at,
        )

    async def create_domain(self, organization_id: str, domain: str, verification_token: str) -> DomainRecord:
        self.calls.append(("create_domain", organization_id, domain, verification_token))
        if any(r.domain == domain for r in self.records.values()):
            raise DomainAlreadyRegisteredError(domain)
        return self.add(
            DomainTestDataFactory.make_domain_record(
                organization_id=organization_id,
                domain=domain,
                verification_token=verification_token,
            )
        )

    async def mark_verified(self, domain_id: str, checked_at: datetime) -> None:
        self.calls.append(("mark_verified", domain_id))
        self.records[domain_id] = self.records[domain_id].model_copy(
            update={
                "verification_status": VerificationStatus.VERIFIED,
                "verified_at": checked_at,
                "last_checked_at": checked_at,
            }
        )

    async def mark_failed(self, domain_id: str, checked_at: datetime) -> bool:
        self.calls.append(("mark_failed", domain_id))
        if self.records[domain_id].verification_status == VerificationStatus.VERIFIED:
            return False
        self.records[domain_id] = self.records[domain_id].model_copy(
            update={"verification_status": VerificationStatus.FAILED, "last_checked_at": checked_at}
        )
        return True

    def called(self, method: str) -> bool:
        return any(call[0] == method for call in self.calls)


class MockDnsResolver:
    """Zone data keyed by (name, type); unknown names raise NXDOMAIN"""

    def __init__(self):
        self.zone: Dict[tuple, List[str]] = {}
        self.errors: Dict[tuple, str] = {}
        self.lookups: List[tuple] = []

    def set_records(self, name: str, rdtype: str, values: List[str]) -> None:
        self.zone[(name, rdtype)] = list(values)

    def set_error(self, name: str, rdtype: str, code: str) -> None:
        self.errors[(name, rdtype)] = code

    async def _resolve(self, name: str, rdtype: str) -> List[str]:
        self.lookups.append((name, rdtype))
        if (name, rdtype) in self.errors:
            raise DnsLookupError(self.errors[(name, rdtype)])
        if (name, rdtype) not in self.zone:
            raise DnsLookupError("NXDOMAIN")
        return self.zone[(name, rdtype)]

    async def resolve_txt(self, name: str) -> List[str]:
        return await self._resolve(name, "TXT")

    async def resolve_a(self, name: str) -> List[str]:
        return await self._resolve(name, "A")

    async def resolve_cname(self, name: str) -> List[str]:
        return await self._resolve(name, "CNAME")


class MockCertificateIssuer:
    """Records issued domains; can be told to fail"""

    def __init__(self):
        self.issued: List[str] = []
        self.error: Optional[CertificateIssuanceError] = None

    async def issue_certificate(self, domain: str) -> str:
        if self.error:
            raise self.error
        self.issued.append(domain)
        return "Congratulations! Your certificate has been saved."


@pytest.fixture
def domain_repository():
    return MockDomainRepository()


@pytest.fixture
def dns_resolver():
    return MockDnsResolver()


@pytest.fixture
def certificate_issuer():
    return MockCertificateIssuer()


@pytest.fixture
def domain_service(domain_repository, dns_resolver, certificate_issuer):
    return DomainService(domain_repository, dns_resolver, certificate_issuer, environment="development")


@pytest.fixture
def production_domain_service(domain_repository, dns_resolver, certificate_issuer):
    return DomainService(domain_repository, dns_resolver, certificate_issuer, environment="production")
