"""
Test suite for application settings.

Run tests:
    pytest tests/core/test_config.py -v
"""

import pytest
from pydantic import ValidationError

from social_auth.core.config import Settings, get_settings


class TestSettingsDefaults:

    def test_defaults(self, monkeypatch):
        for key in (
            "GOOGLE_CLIENT_ID",
            "GOOGLE_CLIENT_SECRET",
            "GOOGLE_REDIRECT_URI",
            "ENVIRONMENT",
        ):
            monkeypatch.delenv(key, raising=False)

        config = Settings(_env_file=None)

        assert config.GOOGLE_CLIENT_ID == ""
        assert config.GOOGLE_SCOPES == ["email", "profile"]
        assert config.LOGIN_URL == "/user/login"
        assert config.ACCESS_TOKEN_SESSION_KEY == "social_auth_google_access_token"
        assert config.SOCIAL_AUTH_PLUGIN_ID == "social_auth_google"
        assert config.OAUTH_STATE_ENABLED is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLIENT_ID", "env-client")
        monkeypatch.setenv("GOOGLE_SCOPES", '["email"]')

        config = Settings(_env_file=None)

        assert config.GOOGLE_CLIENT_ID == "env-client"
        assert config.GOOGLE_SCOPES == ["email"]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestProductionValidation:

    def test_production_rejects_default_session_secret(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, ENVIRONMENT="production")

        assert "SESSION_SECRET_KEY" in str(exc_info.value)

    def test_production_accepts_custom_session_secret(self):
        config = Settings(
            _env_file=None,
            ENVIRONMENT="production",
            SESSION_SECRET_KEY="a-long-random-secret",
        )

        assert config.ENVIRONMENT == "production"

    def test_development_allows_default_session_secret(self):
        config = Settings(_env_file=None, ENVIRONMENT="development")

        assert config.SESSION_SECRET_KEY == "supersecretkey"
