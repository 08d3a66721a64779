"""
Domain Service Factory

Factory for creating domain service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.auth_dependencies import AuthResolver
from core.config_manager import ConfigManager
from core.jwt_manager import JWTManager
from core.postgres_client import PostgresClient
from core.profile_repository import ProfileRepository

from .clients.certificate_client import CertbotClient
from .clients.dns_client import DnsClient
from .domain_repository import DomainRepository
from .domain_service import DomainService

logger = logging.getLogger(__name__)


class DomainServiceFactory:
    """Factory for creating domain service components"""

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config or ConfigManager("domain_service")
        self._db: Optional[PostgresClient] = None
        self._repository: Optional[DomainRepository] = None
        self._service: Optional[DomainService] = None
        self._auth_resolver: Optional[AuthResolver] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Domain Service components...")
        settings = self.config.settings

        self._db = PostgresClient("domain_service", config=settings.infrastructure)
        self._repository = DomainRepository(self._db)
        await self._repository.initialize()

        self._auth_resolver = AuthResolver(
            jwt_manager=JWTManager.from_config(settings.auth),
            profiles=ProfileRepository(self._db),
        )

        self._service = DomainService(
            repository=self._repository,
            dns_resolver=DnsClient(timeout=settings.domains.dns_timeout_seconds),
            certificate_issuer=CertbotClient(settings.domains),
            environment=settings.environment,
        )

        logger.info("Domain Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Domain Service components...")

        if self._repository:
            await self._repository.close()

        logger.info("Domain Service components closed")

    @property
    def repository(self) -> DomainRepository:
        """Get domain repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def service(self) -> DomainService:
        """Get domain service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service

    @property
    def auth_resolver(self) -> AuthResolver:
        """Get request authenticator"""
        if not self._auth_resolver:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._auth_resolver


__all__ = ["DomainServiceFactory"]
