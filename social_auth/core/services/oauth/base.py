"""
Base OAuth provider abstract class and core data types.

Example usage:
    from social_auth.core.services.oauth.base import (
        BaseOAuthProvider,
        OAuthClientConfig,
        OAuthUserInfo,
    )

    class MyOAuthProvider(BaseOAuthProvider):
        provider_name = "my_provider"

        def get_authorization_url(self, state: str | None = None) -> str:
            ...

        async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
            ...

        async def get_user_info(self, access_token: str) -> OAuthUserInfo | None:
            ...
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable

from itsdangerous import BadData, URLSafeTimedSerializer

from social_auth.core.config import settings
from social_auth.core.exceptions.types import ConfigurationException


__all__ = [
    "BaseOAuthProvider",
    "OAuthClientConfig",
    "AuthorizationRequest",
    "OAuthTokens",
    "OAuthUserInfo",
    "OAuthStateData",
    "OAuthStateManager",
    "generate_state",
]


def generate_state(length: int = 32) -> str:
    """
    Generate a cryptographically secure random state token.

    Args:
        length: Number of random bytes to generate. Default is 32 bytes
                which produces a 64-character hex string.

    Returns:
        str: A hex-encoded random string of length * 2 characters.

    Example:
        >>> len(generate_state())
        64
        >>> len(generate_state(length=16))
        32
    """
    return secrets.token_hex(length)


def _ordered_scopes(scopes: Iterable[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for scope in scopes:
        scope = scope.strip()
        if scope and scope not in seen:
            seen.append(scope)
    return tuple(seen)


@dataclass(frozen=True)
class OAuthClientConfig:
    """
    Immutable OAuth client configuration for one provider.

    Scopes are kept as an ordered set: blanks and duplicates are dropped,
    first occurrence order is kept.

    Attributes:
        client_id: OAuth client identifier.
        client_secret: OAuth client secret. Never leaves the server.
        redirect_uri: Callback URI registered with the provider.
        scopes: Requested scopes, in request order.

    Example:
        >>> config = OAuthClientConfig(
        ...     client_id="id",
        ...     client_secret="secret",
        ...     redirect_uri="https://app/cb",
        ...     scopes=["email", "profile", "email"],
        ... )
        >>> config.scopes
        ('email', 'profile')
    """

    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    scopes: tuple[str, ...] = ("email", "profile")

    def __post_init__(self) -> None:
        object.__setattr__(self, "scopes", _ordered_scopes(self.scopes))

    def validate(self) -> "OAuthClientConfig":
        """
        Check that the configuration can be used to start a login.

        Returns:
            OAuthClientConfig: The same configuration, for chaining.

        Raises:
            ConfigurationException: If client id, client secret or redirect
                URI is missing, or no scope is requested.
        """
        missing = [
            name
            for name in ("client_id", "client_secret", "redirect_uri")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationException(
                message=f"OAuth client is missing required settings: {', '.join(missing)}"
            )
        if not self.scopes:
            raise ConfigurationException(
                message="OAuth client must request at least one scope"
            )
        return self


@dataclass(frozen=True)
class AuthorizationRequest:
    """Provider authorization URL and the state token issued with it."""

    url: str
    state: str | None = None


@dataclass
class OAuthTokens:
    """
    Container for OAuth tokens returned from token exchange.

    Attributes:
        access_token: The access token for API calls.
        token_type: The type of token (usually "Bearer").
        expires_in: Optional token expiration time in seconds.
        refresh_token: Optional refresh token for obtaining new access tokens.
        scope: Optional space-separated list of granted scopes.
        id_token: Optional OpenID Connect ID token (JWT).
    """

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None
    id_token: str | None = None


@dataclass
class OAuthUserInfo:
    """
    Normalized user information from OAuth providers.

    Attributes:
        provider: The OAuth provider name (e.g., "google").
        provider_user_id: The user's unique ID from the provider.
        email: The user's email address, the external identity key.
        email_verified: Whether the email has been verified by the provider.
        name: Optional full display name.
        picture: Optional URL to profile picture.
        raw_data: The complete raw response from the provider API.

    Example:
        >>> user_info = OAuthUserInfo(
        ...     provider="google",
        ...     provider_user_id="42",
        ...     email="a@b.com",
        ...     name="A",
        ...     picture="p.png",
        ... )
        >>> user_info.provisioning_fields()
        ('a@b.com', 'A', '42', 'p.png')
    """

    provider: str
    provider_user_id: str
    email: str
    email_verified: bool = False
    name: str | None = None
    picture: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    def provisioning_fields(self) -> tuple[str, str | None, str, str | None]:
        """Return ``(email, name, provider_user_id, picture)`` in that order."""
        return (self.email, self.name, self.provider_user_id, self.picture)


class BaseOAuthProvider(ABC):
    """
    Abstract base class for OAuth providers.

    Each instance is bound to one OAuthClientConfig and owns the HTTP
    client it uses to talk to the provider.

    Subclasses must implement:
        - provider_name: Class attribute with the provider name
        - get_authorization_url: Generate OAuth authorization URL
        - exchange_code_for_tokens: Exchange auth code for access tokens
        - get_user_info: Retrieve user information using access token
    """

    provider_name: str

    def __init__(self, config: OAuthClientConfig) -> None:
        self.config = config

    async def init(self) -> None:
        """Open any resources the provider needs. Default: nothing."""

    async def aclose(self) -> None:
        """Release resources opened by ``init``. Default: nothing."""

    @abstractmethod
    def get_authorization_url(self, state: str | None = None) -> str:
        """
        Generate the OAuth authorization URL.

        Args:
            state: Optional state token for CSRF protection.

        Returns:
            str: The full authorization URL with query parameters.
        """

    @abstractmethod
    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange an authorization code for access tokens.

        Args:
            code: The authorization code from the OAuth callback.

        Returns:
            OAuthTokens: Container with access token and related data.

        Raises:
            ProviderException: If token exchange fails.
        """

    @abstractmethod
    async def get_user_info(self, access_token: str) -> OAuthUserInfo | None:
        """
        Retrieve user information using an access token.

        Args:
            access_token: A valid access token from token exchange.

        Returns:
            OAuthUserInfo | None: Normalized user information, or None when
                the provider returned no identity.

        Raises:
            ProfileFetchException: If user info retrieval fails.
        """


_state_serializer = URLSafeTimedSerializer(
    secret_key=settings.SESSION_SECRET_KEY,
    salt="oauth-state",
)


@dataclass
class OAuthStateData:
    """Data encoded in OAuth state parameter."""

    provider: str | None = None
    nonce: str = field(default_factory=lambda: secrets.token_hex(16))


class OAuthStateManager:
    """
    Manager for encoding/decoding OAuth state parameters.

    Uses itsdangerous to sign and serialize state data, ensuring
    it hasn't been tampered with and hasn't expired. The nonce inside
    the state is also kept in the session so a state issued to one
    browser cannot be replayed by another.
    """

    STATE_MAX_AGE_SECONDS: int = settings.OAUTH_STATE_MAX_AGE_SECONDS

    @classmethod
    def encode_state(cls, provider: str, nonce: str) -> str:
        """
        Encode OAuth state data into a signed, URL-safe string.

        Args:
            provider: Provider key the login was started for.
            nonce: Random value also stored in the session.

        Returns:
            str: Signed, URL-safe state string.
        """
        return _state_serializer.dumps({"provider": provider, "nonce": nonce})

    @classmethod
    def decode_state(cls, state: str) -> OAuthStateData | None:
        """
        Decode and verify OAuth state parameter.

        Args:
            state: The signed state string from OAuth callback.

        Returns:
            OAuthStateData if valid, None if invalid or expired.
        """
        try:
            data = _state_serializer.loads(state, max_age=cls.STATE_MAX_AGE_SECONDS)
        except BadData:
            return None
        if not isinstance(data, dict):
            return None
        return OAuthStateData(
            provider=data.get("provider"),
            nonce=data.get("nonce", ""),
        )

    @classmethod
    def verify_state(
        cls, state: str | None, expected_nonce: str | None, provider: str
    ) -> bool:
        """
        Check a callback state against the nonce issued to this session.

        Args:
            state: The ``state`` query parameter from the callback.
            expected_nonce: The nonce stored in the session at initiation.
            provider: Provider key of the callback route.

        Returns:
            bool: True only if the state is authentic, unexpired, issued for
                this provider and carries the session's nonce.
        """
        if not state or not expected_nonce:
            return False
        data = cls.decode_state(state)
        if data is None or data.provider != provider:
            return False
        return secrets.compare_digest(data.nonce, expected_nonce)
