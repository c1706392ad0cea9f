"""
Pytest configuration and core fixtures.

Settings are read from the environment when ``social_auth.core.config`` is
first imported, so the test environment is set up before any application
import.
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import urlencode

os.environ["ENVIRONMENT"] = "test"
os.environ["SENTRY_DSN"] = ""
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="social-auth-logs-"))
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault(
    "GOOGLE_REDIRECT_URI", "https://test/user/login/google/callback"
)

import pytest  # noqa: E402
from fastapi import status  # noqa: E402
from fastapi.responses import RedirectResponse  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from social_auth.core.services.oauth import (  # noqa: E402
    BaseOAuthProvider,
    NetworkManager,
    OAuthClientConfig,
    OAuthTokens,
    OAuthUserInfo,
)
from social_auth.core.services.session import RequestSessionStore  # noqa: E402


class StubOAuthProvider(BaseOAuthProvider):
    """OAuth client double that records calls and returns canned data."""

    provider_name = "google"

    def __init__(self, config: OAuthClientConfig) -> None:
        super().__init__(config)
        self.tokens = OAuthTokens(access_token="tok1", expires_in=3600)
        self.user_info: OAuthUserInfo | None = OAuthUserInfo(
            provider="google",
            provider_user_id="42",
            email="a@b.com",
            email_verified=True,
            name="A",
            picture="p.png",
        )
        self.exchange_error: Exception | None = None
        self.profile_error: Exception | None = None
        self.exchanged_codes: list[str] = []
        self.profile_tokens: list[str] = []
        self.closed = False

    def get_authorization_url(self, state: str | None = None) -> str:
        config = self.config.validate()
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "scope": " ".join(config.scopes),
        }
        if state:
            params["state"] = state
        return f"https://provider.test/auth?{urlencode(params)}"

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        self.exchanged_codes.append(code)
        if self.exchange_error is not None:
            raise self.exchange_error
        return self.tokens

    async def get_user_info(self, access_token: str) -> OAuthUserInfo | None:
        self.profile_tokens.append(access_token)
        if self.profile_error is not None:
            raise self.profile_error
        return self.user_info

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def oauth_config() -> OAuthClientConfig:
    return OAuthClientConfig(
        client_id="client-123",
        client_secret="super-secret-value",
        redirect_uri="https://app/cb",
        scopes=("email", "profile"),
    )


@pytest.fixture
def stub_provider(oauth_config: OAuthClientConfig) -> StubOAuthProvider:
    return StubOAuthProvider(oauth_config)


@pytest.fixture
def network_manager(stub_provider: StubOAuthProvider) -> NetworkManager:
    manager = NetworkManager()
    manager.register("google", stub_provider)
    return manager


@pytest.fixture
def session_data() -> dict:
    """Raw session mapping, for asserting what the flow wrote."""
    return {}


@pytest.fixture
def session_store(session_data: dict) -> RequestSessionStore:
    return RequestSessionStore(session_data)


@pytest.fixture
def user_manager() -> MagicMock:
    """User manager double whose response is a recognisable redirect."""
    manager = MagicMock()
    manager.authenticate_user = AsyncMock(
        return_value=RedirectResponse(
            url="/welcome", status_code=status.HTTP_302_FOUND
        )
    )
    return manager


@pytest.fixture
def app():
    """FastAPI application for testing."""
    from social_auth.main import app as fastapi_app

    return fastapi_app


@pytest.fixture
async def client(
    app, network_manager: NetworkManager
) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client with the OAuth registry overridden.

    Uses https so the secure session cookie is sent back on later requests.
    """
    from social_auth.core.dependencies import get_network_manager

    app.dependency_overrides[get_network_manager] = lambda: network_manager

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="https://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_network_manager, None)
