"""
Unit Tests for environment-driven configuration
"""

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import AuthConfig, DomainConfig, EmailConfig, InfraConfig, PlatformConfig
from core.config_manager import ConfigManager


class TestEmailConfig:

    def test_defaults(self, monkeypatch):
        for name in ("RESEND_API_KEY", "CAMPAIGN_BATCH_SIZE", "CAMPAIGN_BATCH_DELAY_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        config = EmailConfig.from_env()

        assert config.enabled is False
        assert config.campaign_batch_size == 50
        assert config.campaign_batch_delay_seconds == 1.0

    def test_enabled_with_api_key(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_test_key")
        assert EmailConfig.from_env().enabled is True

    @pytest.mark.parametrize("raw,expected", [("0", 1), ("-5", 1), ("abc", 50), ("200", 200)])
    def test_batch_size(self, monkeypatch, raw, expected):
        monkeypatch.setenv("CAMPAIGN_BATCH_SIZE", raw)
        assert EmailConfig.from_env().campaign_batch_size == expected

    @pytest.mark.parametrize("raw,expected", [("-1", 0.0), ("0", 0.0), ("nope", 1.0), ("2.5", 2.5)])
    def test_batch_delay(self, monkeypatch, raw, expected):
        monkeypatch.setenv("CAMPAIGN_BATCH_DELAY_SECONDS", raw)
        assert EmailConfig.from_env().campaign_batch_delay_seconds == expected


class TestDomainConfig:

    def test_default_commands(self, monkeypatch):
        monkeypatch.delenv("CERTBOT_COMMAND", raising=False)
        monkeypatch.delenv("PROXY_RELOAD_COMMAND", raising=False)

        config = DomainConfig.from_env()

        assert config.certbot_command == ["sudo", "certbot"]
        assert config.proxy_reload_command == ["sudo", "nginx", "-s", "reload"]

    def test_commands_split_into_argv(self, monkeypatch):
        monkeypatch.setenv("CERTBOT_COMMAND", "/usr/bin/certbot")
        monkeypatch.setenv("PROXY_RELOAD_COMMAND", "systemctl reload nginx")

        config = DomainConfig.from_env()

        assert config.certbot_command == ["/usr/bin/certbot"]
        assert config.proxy_reload_command == ["systemctl", "reload", "nginx"]


class TestAuthAndInfraConfig:

    def test_jwt_secret_fallback(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_JWT_SECRET", raising=False)
        monkeypatch.setenv("JWT_SECRET", "fallback")
        assert AuthConfig.from_env().jwt_secret == "fallback"

    def test_database_url_wins(self):
        config = InfraConfig(database_url="postgresql://u:p@db:6543/app")
        assert config.postgres_dsn == "postgresql://u:p@db:6543/app"

    def test_dsn_from_fields(self):
        config = InfraConfig(postgres_host="db", postgres_port=5433, postgres_db="app",
                             postgres_user="svc", postgres_password="pw")
        assert config.postgres_dsn == "postgresql://svc:pw@db:5433/app"


class TestPlatformConfig:

    def test_production_flag(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        monkeypatch.delenv("DEBUG", raising=False)
        config = PlatformConfig.from_env()
        assert config.is_production is True
        assert config.debug is False

    def test_testing_is_not_production(self, monkeypatch):
        monkeypatch.setenv("ENV", "testing")
        assert PlatformConfig.from_env().is_production is False


class TestConfigManager:

    def test_default_service_ports(self, monkeypatch):
        monkeypatch.delenv("DOMAIN_SERVICE_PORT", raising=False)
        monkeypatch.delenv("CAMPAIGN_SERVICE_PORT", raising=False)
        monkeypatch.delenv("SERVICE_PORT", raising=False)
        settings = PlatformConfig()

        assert ConfigManager("domain_service", settings).get_service_config().service_port == 8260
        assert ConfigManager("campaign_service", settings).get_service_config().service_port == 8261

    def test_port_override(self, monkeypatch):
        monkeypatch.setenv("DOMAIN_SERVICE_PORT", "9100")
        config = ConfigManager("domain_service", PlatformConfig()).get_service_config()
        assert config.service_port == 9100

    def test_invalid_port_falls_back(self, monkeypatch):
        monkeypatch.setenv("CAMPAIGN_SERVICE_PORT", "not-a-port")
        config = ConfigManager("campaign_service", PlatformConfig()).get_service_config()
        assert config.service_port == 8261

    def test_environment_carried_through(self):
        config = ConfigManager("domain_service", PlatformConfig(environment="production")).get_service_config()
        assert config.is_production is True
