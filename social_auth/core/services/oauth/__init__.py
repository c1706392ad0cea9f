"""
OAuth provider services.

This package contains the OAuth client used for social login:
- BaseOAuthProvider: Abstract base class for OAuth providers
- GoogleOAuthService: Google OAuth 2.0 implementation
- NetworkManager: Registry returning the configured client per provider
- OAuthStateManager: Manager for encoding/decoding OAuth state parameters

Example usage:
    from social_auth.core.config import settings
    from social_auth.core.services.oauth import build_network_manager

    network_manager = build_network_manager(settings)
    await network_manager.init()

    google = network_manager.get_sdk("google")
    url = google.get_authorization_url(state="signed_state")
"""

from social_auth.core.services.oauth.base import (
    AuthorizationRequest,
    BaseOAuthProvider,
    OAuthClientConfig,
    OAuthStateData,
    OAuthStateManager,
    OAuthTokens,
    OAuthUserInfo,
    generate_state,
)
from social_auth.core.services.oauth.google import GoogleOAuthService
from social_auth.core.services.oauth.registry import (
    NetworkManager,
    build_network_manager,
)


__all__ = [
    "AuthorizationRequest",
    "BaseOAuthProvider",
    "OAuthClientConfig",
    "OAuthTokens",
    "OAuthUserInfo",
    "OAuthStateData",
    "OAuthStateManager",
    "generate_state",
    "GoogleOAuthService",
    "NetworkManager",
    "build_network_manager",
]
