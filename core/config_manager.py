#!/usr/bin/env python3
"""
Centralized configuration access for a single microservice

Wraps the global PlatformConfig and adds the per-service settings
(port, log level) each service reads at startup.

Usage:
    from core.config_manager import ConfigManager

    config_manager = ConfigManager("domain_service")
    config = config_manager.get_service_config()
    uvicorn.run(app, port=config.service_port)
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from core.config import PlatformConfig, get_settings

logger = logging.getLogger(__name__)

# Default ports per service
DEFAULT_PORTS: Dict[str, int] = {
    "domain_service": 8260,
    "campaign_service": 8261,
}


@dataclass
class ServiceConfig:
    """Runtime settings of one service"""
    service_name: str
    service_host: str
    service_port: int
    log_level: str
    debug: bool
    environment: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class ConfigManager:
    """Per-service view over the platform configuration"""

    def __init__(self, service_name: str, settings: Optional[PlatformConfig] = None):
        self.service_name = service_name
        self.settings = settings or get_settings()
        self._service_config: Optional[ServiceConfig] = None

    def get_service_config(self) -> ServiceConfig:
        """Build (once) and return the runtime config for this service"""
        if self._service_config is None:
            env_prefix = self.service_name.upper()
            default_port = DEFAULT_PORTS.get(self.service_name, self.settings.default_port)
            port_value = os.getenv(f"{env_prefix}_PORT") or os.getenv("SERVICE_PORT")
            try:
                port = int(port_value) if port_value else default_port
            except ValueError:
                logger.warning(f"Invalid port '{port_value}' for {self.service_name}, using {default_port}")
                port = default_port

            self._service_config = ServiceConfig(
                service_name=self.service_name,
                service_host=self.settings.default_host,
                service_port=port,
                log_level=self.settings.logging.log_level,
                debug=self.settings.debug,
                environment=self.settings.environment,
            )
        return self._service_config

    def print_config_summary(self, show_secrets: bool = False) -> None:
        """Log a summary of the effective configuration"""
        service = self.get_service_config()
        infra = self.settings.infrastructure
        email = self.settings.email

        def _secret(value: Optional[str]) -> str:
            if not value:
                return "<not set>"
            return value if show_secrets else "****"

        logger.info(f"=== {self.service_name} configuration ===")
        logger.info(f"environment={service.environment} debug={service.debug} port={service.service_port}")
        logger.info(f"postgres={infra.postgres_host}:{infra.postgres_port}/{infra.postgres_db}")
        logger.info(f"jwt_secret={_secret(self.settings.auth.jwt_secret)}")
        logger.info(
            f"resend_api_key={_secret(email.resend_api_key)} from={email.from_address} "
            f"batch_size={email.campaign_batch_size} batch_delay={email.campaign_batch_delay_seconds}s"
        )


__all__ = ["ConfigManager", "ServiceConfig", "DEFAULT_PORTS"]
