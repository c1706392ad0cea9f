"""
Google OAuth 2.0 provider implementation.

This module provides OAuth 2.0 authentication with Google using the
standard authorization code flow.

Example usage:
    from social_auth.core.services.oauth import GoogleOAuthService, OAuthClientConfig

    google = GoogleOAuthService(
        OAuthClientConfig(
            client_id="...",
            client_secret="...",
            redirect_uri="https://app.com/user/login/google/callback",
            scopes=("email", "profile"),
        )
    )
    await google.init()

    url = google.get_authorization_url(state="signed_state")

    # After user authorization, exchange code for tokens
    tokens = await google.exchange_code_for_tokens(code="4/0auth_code")

    user_info = await google.get_user_info(tokens.access_token)

    await google.aclose()
"""

from urllib.parse import urlencode

import httpx

from social_auth.core.config import auth_logger, settings
from social_auth.core.exceptions.types import (
    ProfileFetchException,
    ProviderException,
)
from social_auth.core.services.oauth.base import (
    BaseOAuthProvider,
    OAuthClientConfig,
    OAuthTokens,
    OAuthUserInfo,
)


__all__ = ["GoogleOAuthService"]


class GoogleOAuthService(BaseOAuthProvider):
    """
    Google OAuth 2.0 service implementation.

    Provider failures are never retried; a failed exchange or profile
    fetch is reported to the caller immediately.

    Google API Endpoints:
        - Authorization: https://accounts.google.com/o/oauth2/v2/auth
        - Token: https://oauth2.googleapis.com/token
        - User Info: https://www.googleapis.com/oauth2/v3/userinfo
    """

    provider_name: str = "google"

    _AUTHORIZATION_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    _TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    _USERINFO_URL: str = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(
        self,
        config: OAuthClientConfig,
        timeout: float | None = None,
    ) -> None:
        super().__init__(config)
        self._timeout = timeout or settings.OAUTH_HTTP_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def init(self) -> None:
        """
        Initialize the HTTP client.

        Should be called during application startup. Calling it again
        replaces the existing client.
        """
        await self.aclose()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        auth_logger.info("GoogleOAuthService initialized")

    async def aclose(self) -> None:
        """
        Close the HTTP client and cleanup resources.

        Should be called during application shutdown.
        """
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None
                auth_logger.info("GoogleOAuthService closed")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.init()
            assert self._client is not None, "Client initialization failed"
        return self._client

    def get_authorization_url(self, state: str | None = None) -> str:
        """
        Generate Google OAuth authorization URL.

        The URL carries the client id, the configured redirect URI and
        scopes, and the state when one is given. The client secret is
        never part of it.

        Args:
            state: Optional state token for CSRF protection.

        Returns:
            str: The full authorization URL with query parameters.

        Raises:
            ConfigurationException: If the client configuration is incomplete.

        Example:
            >>> url = google.get_authorization_url(state="abc123")
            >>> # Redirect user to this URL
        """
        config = self.config.validate()
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(config.scopes),
        }
        if state:
            params["state"] = state
        return f"{self._AUTHORIZATION_URL}?{urlencode(params)}"

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access tokens.

        Args:
            code: The authorization code from the OAuth callback.

        Returns:
            OAuthTokens: Container with access_token, token_type,
                        expires_in, refresh_token, scope, and id_token.

        Raises:
            ProviderException: If token exchange fails due to invalid code,
                           network error, or a malformed response.
        """
        client = await self._get_client()
        config = self.config.validate()

        data = {
            "code": code,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": config.redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            response = await client.post(self._TOKEN_URL, data=data)
        except httpx.RequestError as e:
            auth_logger.error(f"Google token exchange network error: {e}")
            raise ProviderException(
                message="Google token exchange failed: network error"
            ) from e

        if response.status_code != 200:
            auth_logger.error(
                f"Google token exchange failed: status={response.status_code}, "
                f"response={response.text}"
            )
            raise ProviderException(
                message=f"Google token exchange failed: {response.text}"
            )

        try:
            token_data = response.json()
            access_token = token_data["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            auth_logger.error("Google token exchange returned no access token")
            raise ProviderException(
                message="Google token exchange failed: malformed response"
            ) from e

        auth_logger.info("Google token exchange successful")

        return OAuthTokens(
            access_token=access_token,
            token_type=token_data.get("token_type", "Bearer"),
            expires_in=token_data.get("expires_in"),
            refresh_token=token_data.get("refresh_token"),
            scope=token_data.get("scope"),
            id_token=token_data.get("id_token"),
        )

    async def get_user_info(self, access_token: str) -> OAuthUserInfo | None:
        """
        Retrieve user information from Google.

        Args:
            access_token: A valid access token from token exchange.

        Returns:
            OAuthUserInfo | None: Normalized user information, or None if
                Google answered without a user id or a verified email.

        Raises:
            ProfileFetchException: If Google rejects the token or cannot
                be reached.
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            response = await client.get(self._USERINFO_URL, headers=headers)
        except httpx.RequestError as e:
            auth_logger.error(f"Google user info network error: {type(e).__name__}: {e}")
            raise ProfileFetchException(
                message="Failed to retrieve Google user info: network error"
            ) from e

        if response.status_code != 200:
            auth_logger.error(
                f"Google user info retrieval failed: status={response.status_code}"
            )
            raise ProfileFetchException(
                message=f"Failed to retrieve Google user info: {response.text}"
            )

        try:
            user_data = response.json()
        except ValueError as e:
            raise ProfileFetchException(
                message="Failed to retrieve Google user info: malformed response"
            ) from e

        if (
            not isinstance(user_data, dict)
            or not user_data.get("sub")
            or not user_data.get("email")
        ):
            auth_logger.warning("Google user info response carried no identity")
            return None

        # The email is the identity key, so Google must have verified it
        if user_data.get("email_verified") is not True:
            auth_logger.warning(
                f"Google user info rejected: email not verified for user_id={user_data['sub']}"
            )
            return None

        auth_logger.info(f"Google user info retrieved: user_id={user_data['sub']}")

        return OAuthUserInfo(
            provider=self.provider_name,
            provider_user_id=str(user_data["sub"]),
            email=user_data["email"],
            email_verified=True,
            name=user_data.get("name"),
            picture=user_data.get("picture"),
            raw_data=user_data,
        )
