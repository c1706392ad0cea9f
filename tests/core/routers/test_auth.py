"""
Test suite for the social login router.

Requests go through the full application, including the cookie session,
with the OAuth client registry replaced by a stub provider.

Run tests:
    pytest tests/core/routers/test_auth.py -v
"""

from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import status
from httpx import AsyncClient

from social_auth.core.config import settings
from social_auth.core.services.auth_flow import AUTHENTICATION_FAILED_MESSAGE
from social_auth.core.services.oauth import OAuthClientConfig


async def _start_login(client: AsyncClient) -> str:
    response = await client.get("/user/login/google", follow_redirects=False)
    assert response.status_code == status.HTTP_302_FOUND
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


class TestRedirectToProvider:

    @pytest.mark.asyncio
    async def test_redirects_to_provider(self, client: AsyncClient):
        response = await client.get("/user/login/google", follow_redirects=False)

        assert response.status_code == status.HTTP_302_FOUND
        location = response.headers["location"]
        assert location.startswith("https://provider.test/auth?")
        params = parse_qs(urlparse(location).query)
        assert params["scope"] == ["email profile"]
        assert params["redirect_uri"] == ["https://app/cb"]
        assert "state" in params
        assert "super-secret-value" not in location

    @pytest.mark.asyncio
    async def test_sets_session_cookie(self, client: AsyncClient):
        response = await client.get("/user/login/google", follow_redirects=False)

        assert settings.SESSION_COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_invalid_provider(self, client: AsyncClient):
        response = await client.get("/user/login/invalid", follow_redirects=False)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_missing_configuration(self, client: AsyncClient, stub_provider):
        stub_provider.config = OAuthClientConfig(
            client_id="", client_secret="", redirect_uri=""
        )

        response = await client.get("/user/login/google", follow_redirects=False)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "client_id" in response.json()["detail"]


class TestProviderCallback:

    @pytest.mark.asyncio
    async def test_full_login_flow(self, client: AsyncClient, stub_provider):
        state = await _start_login(client)

        response = await client.get(
            "/user/login/google/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == settings.POST_LOGIN_REDIRECT_URL
        assert stub_provider.exchanged_codes == ["abc"]

        page = await client.get("/user/login")
        body = page.json()
        assert body["messages"] == []
        assert body["user"] == {
            "plugin_id": settings.SOCIAL_AUTH_PLUGIN_ID,
            "email": "a@b.com",
            "name": "A",
            "external_id": "42",
            "picture": "p.png",
        }

    @pytest.mark.asyncio
    async def test_user_manager_receives_profile(
        self, app, client: AsyncClient, user_manager: MagicMock
    ):
        from social_auth.core.dependencies import get_user_manager

        app.dependency_overrides[get_user_manager] = lambda: user_manager
        try:
            state = await _start_login(client)
            response = await client.get(
                "/user/login/google/callback",
                params={"code": "abc", "state": state},
                follow_redirects=False,
            )
        finally:
            app.dependency_overrides.pop(get_user_manager, None)

        user_manager.authenticate_user.assert_awaited_once_with(
            "a@b.com", "A", "42", "p.png"
        )
        assert response.headers["location"] == "/welcome"

    @pytest.mark.asyncio
    async def test_access_denied_redirects_to_login(
        self, client: AsyncClient, stub_provider
    ):
        await _start_login(client)

        response = await client.get(
            "/user/login/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == settings.LOGIN_URL
        assert stub_provider.exchanged_codes == []

        page = await client.get("/user/login")
        body = page.json()
        assert body["user"] is None
        assert body["messages"] == [
            {"message": AUTHENTICATION_FAILED_MESSAGE, "level": "error"}
        ]

    @pytest.mark.asyncio
    async def test_messages_shown_once(self, client: AsyncClient):
        await client.get(
            "/user/login/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False,
        )

        first = await client.get("/user/login")
        second = await client.get("/user/login")

        assert len(first.json()["messages"]) == 1
        assert second.json()["messages"] == []

    @pytest.mark.asyncio
    async def test_callback_without_login_start_fails(
        self, client: AsyncClient, stub_provider
    ):
        response = await client.get(
            "/user/login/google/callback",
            params={"code": "abc", "state": "forged"},
            follow_redirects=False,
        )

        assert response.headers["location"] == settings.LOGIN_URL
        assert stub_provider.exchanged_codes == []

    @pytest.mark.asyncio
    async def test_empty_profile_fails(self, client: AsyncClient, stub_provider):
        stub_provider.user_info = None
        state = await _start_login(client)

        response = await client.get(
            "/user/login/google/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        assert response.headers["location"] == settings.LOGIN_URL
        page = await client.get("/user/login")
        assert page.json()["user"] is None

    @pytest.mark.asyncio
    async def test_missing_code(self, client: AsyncClient, stub_provider):
        state = await _start_login(client)

        response = await client.get(
            "/user/login/google/callback",
            params={"state": state},
            follow_redirects=False,
        )

        assert response.headers["location"] == settings.LOGIN_URL
        assert stub_provider.exchanged_codes == []


class TestLoginPage:

    @pytest.mark.asyncio
    async def test_empty_login_page(self, client: AsyncClient):
        response = await client.get("/user/login")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["messages"] == []
        assert response.json()["user"] is None

    @pytest.mark.asyncio
    async def test_lists_providers_from_app_state(self, app, client: AsyncClient, network_manager):
        app.state.network_manager = network_manager
        try:
            response = await client.get("/user/login")
        finally:
            app.state.network_manager = None

        assert response.json()["providers"] == ["google"]


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_clears_user(self, client: AsyncClient):
        state = await _start_login(client)
        await client.get(
            "/user/login/google/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        response = await client.get("/user/logout", follow_redirects=False)

        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == "/"
        page = await client.get("/user/login")
        assert page.json()["user"] is None


class TestRouterConfiguration:

    def test_router_is_api_router(self):
        from fastapi import APIRouter
        from social_auth.core.routers.auth import router

        assert isinstance(router, APIRouter)

    def test_router_prefix_is_empty(self):
        from social_auth.core.routers.auth import router

        assert router.prefix == ""

    def test_router_has_expected_routes(self):
        from social_auth.core.routers.auth import router

        paths = [route.path for route in router.routes]

        assert "/login" in paths
        assert "/logout" in paths
        assert "/login/{provider}" in paths
        assert "/login/{provider}/callback" in paths
