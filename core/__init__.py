#!/usr/bin/env python3
"""
Core Module for the membership platform microservices

Shared infrastructure used by the domain and campaign services.

COMPONENTS:
    - config/: Dataclass configuration loaded from the environment
    - config_manager.py: Per-service configuration (port, log level)
    - logger.py: Service logging setup
    - postgres_client.py: asyncpg pool wrapper
    - jwt_manager.py: Supabase access token verification
    - auth_dependencies.py: Bearer token to AuthContext resolution
    - permissions.py: Committee permission aggregation
    - profile_repository.py: Profile and committee position lookups
    - validation.py: Domain and email validation

USAGE:
    from core.config_manager import ConfigManager

    config = ConfigManager("domain_service")
"""

from .config_manager import ConfigManager, ServiceConfig

__all__ = [
    "ConfigManager",
    "ServiceConfig",
]

__version__ = "1.0.0"
