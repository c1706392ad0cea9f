from social_auth.core.services.auth_flow import (
    AUTHENTICATION_FAILED_MESSAGE,
    AuthorizationInitiator,
    AuthResult,
    CallbackHandler,
)
from social_auth.core.services.session import (
    RequestSessionStore,
    SessionStore,
    add_flash_message,
    pop_flash_messages,
)
from social_auth.core.services.user_manager import SessionUserManager, UserManager

# OAuth providers
from social_auth.core.services.oauth import (
    BaseOAuthProvider,
    GoogleOAuthService,
    NetworkManager,
    OAuthClientConfig,
    OAuthStateManager,
    OAuthTokens,
    OAuthUserInfo,
    build_network_manager,
)

__all__ = [
    "AUTHENTICATION_FAILED_MESSAGE",
    "AuthorizationInitiator",
    "AuthResult",
    "CallbackHandler",
    "RequestSessionStore",
    "SessionStore",
    "add_flash_message",
    "pop_flash_messages",
    "SessionUserManager",
    "UserManager",
    # OAuth
    "BaseOAuthProvider",
    "GoogleOAuthService",
    "NetworkManager",
    "OAuthClientConfig",
    "OAuthStateManager",
    "OAuthTokens",
    "OAuthUserInfo",
    "build_network_manager",
]
