"""
Campaign Service Factory

Factory for creating campaign service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.auth_dependencies import AuthResolver
from core.config_manager import ConfigManager
from core.jwt_manager import JWTManager
from core.postgres_client import PostgresClient
from core.profile_repository import ProfileRepository

from .campaign_repository import CampaignRepository
from .campaign_service import CampaignService
from .clients.email_client import ResendEmailClient

logger = logging.getLogger(__name__)


class CampaignServiceFactory:
    """Factory for creating campaign service components"""

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config or ConfigManager("campaign_service")
        self._db: Optional[PostgresClient] = None
        self._repository: Optional[CampaignRepository] = None
        self._service: Optional[CampaignService] = None
        self._email_client: Optional[ResendEmailClient] = None
        self._auth_resolver: Optional[AuthResolver] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Campaign Service components...")
        settings = self.config.settings

        self._db = PostgresClient("campaign_service", config=settings.infrastructure)
        self._repository = CampaignRepository(self._db)
        await self._repository.initialize()

        self._auth_resolver = AuthResolver(
            jwt_manager=JWTManager.from_config(settings.auth),
            profiles=ProfileRepository(self._db),
        )

        # Email provider is optional; sends answer 503 without it
        if settings.email.enabled:
            self._email_client = ResendEmailClient(settings.email)
        else:
            logger.warning("Resend API key not configured. Email sending disabled.")

        self._service = CampaignService(
            repository=self._repository,
            email_client=self._email_client,
            batch_size=settings.email.campaign_batch_size,
            batch_delay_seconds=settings.email.campaign_batch_delay_seconds,
            from_address=settings.email.from_address,
        )

        logger.info("Campaign Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Campaign Service components...")

        if self._email_client:
            await self._email_client.close()

        if self._repository:
            await self._repository.close()

        logger.info("Campaign Service components closed")

    @property
    def repository(self) -> CampaignRepository:
        """Get campaign repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def service(self) -> CampaignService:
        """Get campaign service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service

    @property
    def email_client(self) -> Optional[ResendEmailClient]:
        """Get email client (None when not configured)"""
        return self._email_client

    @property
    def auth_resolver(self) -> AuthResolver:
        """Get request authenticator"""
        if not self._auth_resolver:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._auth_resolver


__all__ = ["CampaignServiceFactory"]
