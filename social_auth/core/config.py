from functools import lru_cache
import logging
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from social_auth.core.logger import setup_logger, init_sentry


class Settings(BaseSettings):
    # Application settings
    ENVIRONMENT: str = "development"  # Options: development, production, test
    API_DOMAIN: str = "http://localhost:8000"
    APP_NAME: str = "Social Auth Google"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = """
Google login for web applications using the OAuth 2.0 authorization code flow.

| Route | Description |
|-------|-------------|
| `GET /user/login/google` | Redirects the browser to Google Accounts. |
| `GET /user/login/google/callback` | Completes the login and redirects into the application. |
| `GET /user/login` | Login page; returns pending messages and the logged-in user. |
| `GET /user/logout` | Clears the login from the session. |
"""
    DEBUG: bool = False
    LOG_DIR: str = "logs"

    # CORS settings
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000"]
    CORS_ALLOW_CREDENTIALS: bool = True

    # Session settings
    SESSION_COOKIE_NAME: str = "session"
    SESSION_SECRET_KEY: str = "supersecretkey"
    SESSION_SAME_SITE_COOKIE_POLICY: Literal["lax", "strict", "none"] = "lax"
    SESSION_MAX_AGE_SECONDS: int = 14 * 24 * 60 * 60

    # Session keys
    ACCESS_TOKEN_SESSION_KEY: str = "social_auth_google_access_token"
    OAUTH_STATE_SESSION_KEY: str = "social_auth_google_state"
    USER_SESSION_KEY: str = "social_auth_user"

    # Google OAuth settings
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/user/login/google/callback"
    GOOGLE_SCOPES: list[str] = ["email", "profile"]

    # OAuth flow settings
    OAUTH_STATE_ENABLED: bool = True
    OAUTH_STATE_MAX_AGE_SECONDS: int = 600
    OAUTH_HTTP_TIMEOUT_SECONDS: float = 10.0

    # Login settings
    SOCIAL_AUTH_PLUGIN_ID: str = "social_auth_google"
    LOGIN_URL: str = "/user/login"
    POST_LOGIN_REDIRECT_URL: str = "/"
    ALLOWED_EMAIL_DOMAINS: list[str] = []

    # Sentry settings
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    model_config: SettingsConfigDict = SettingsConfigDict(  # type: ignore
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _validate_production_secrets(self) -> "Settings":
        """Ensure the insecure default session secret is overridden in production."""
        if self.ENVIRONMENT != "production":
            return self

        if self.SESSION_SECRET_KEY == "supersecretkey":
            raise ValueError(
                "ENVIRONMENT is 'production' but SESSION_SECRET_KEY still has its "
                "insecure default value. Set it via environment variables or .env file."
            )

        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()  # type: ignore


settings = get_settings()

if not settings.DEBUG:
    init_sentry(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )

# One logger per component, each with its own log file and Sentry tag
app_logger = setup_logger(
    name="app_logger",
    log_file=f"{settings.LOG_DIR}/app.log",
    level=logging.INFO,
    sentry_tag="app",
)
request_logger = setup_logger(
    name="request_logger",
    log_file=f"{settings.LOG_DIR}/requests.log",
    level=logging.INFO,
    sentry_tag="request",
)
auth_logger = setup_logger(
    name="auth_logger",
    log_file=f"{settings.LOG_DIR}/auth.log",
    level=logging.INFO,
    sentry_tag="auth",
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "app_logger",
    "request_logger",
    "auth_logger",
]
