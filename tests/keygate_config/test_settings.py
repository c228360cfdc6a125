"""Unit tests for Settings."""

import logging

import pytest
from pydantic import ValidationError

from keygate_config import Settings, configure_logging, get_settings


class TestSettings:
    """Tests for loading settings from the environment."""

    def test_defaults(self):
        """Token lifetimes and cooldown default to the documented values."""
        settings = get_settings()

        assert settings.jwt_secret_key.get_secret_value()
        assert settings.jwt_session_token_expire_minutes == 60
        assert settings.jwt_verification_token_expire_hours is None
        assert settings.jwt_password_reset_token_expire_minutes == 15
        assert settings.verification_resend_cooldown_minutes == 60
        assert settings.password_hash_rounds == 12

    def test_get_settings_is_cached(self):
        """Repeated calls return the same instance."""
        assert get_settings() is get_settings()

    def test_missing_secret_raises(self, monkeypatch):
        """The signing secret is required."""
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_database_url_from_components(self, monkeypatch):
        """Without an override the URL is built from POSTGRES_* values."""
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_USER", "kg")
        monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
        monkeypatch.setenv("POSTGRES_DB", "identity")

        settings = Settings()

        assert settings.database_url == "postgresql+asyncpg://kg:pw@db:5432/identity"

    def test_database_url_override(self, monkeypatch):
        """DATABASE_URL_OVERRIDE wins over the components."""
        monkeypatch.setenv("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///./kg.db")

        assert Settings().database_url == "sqlite+aiosqlite:///./kg.db"

    def test_empty_verification_expiry_means_none(self, monkeypatch):
        """An empty expiry disables verification token expiry."""
        monkeypatch.setenv("JWT_VERIFICATION_TOKEN_EXPIRE_HOURS", "")

        assert Settings().jwt_verification_token_expire_hours is None

    def test_verification_expiry_from_env(self, monkeypatch):
        """A numeric expiry is parsed."""
        monkeypatch.setenv("JWT_VERIFICATION_TOKEN_EXPIRE_HOURS", "48")

        assert Settings().jwt_verification_token_expire_hours == 48

    def test_frontend_base_url_trailing_slash_stripped(self, monkeypatch):
        """Links are built without a double slash."""
        monkeypatch.setenv("FRONTEND_BASE_URL", "https://app.example.com/")

        assert Settings().frontend_base_url == "https://app.example.com"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_package_levels(self, monkeypatch):
        """Package loggers follow LOG_LEVEL and SQLAlchemy stays quiet."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        configure_logging()

        assert logging.getLogger("keygate_identity").level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
