from typing import Annotated

from fastapi import Depends, Request

from social_auth.core.config import app_logger, settings
from social_auth.core.enums import OAuthProviders
from social_auth.core.services.auth_flow import AuthorizationInitiator, CallbackHandler
from social_auth.core.services.oauth import NetworkManager
from social_auth.core.services.session import RequestSessionStore
from social_auth.core.services.user_manager import SessionUserManager, UserManager


def get_session_store(request: Request) -> RequestSessionStore:
    """Session of the current request, shared by every dependency of the request."""
    return RequestSessionStore(request.session)


def get_network_manager(request: Request) -> NetworkManager:
    """
    Return the OAuth client registry built at application startup.

    Before startup (or after shutdown) an empty registry is returned, so
    every provider lookup raises ``ConfigurationException`` where the flow
    already handles it: a 500 on initiation, a redirect to the login page
    on the callback.
    """
    network_manager = getattr(request.app.state, "network_manager", None)
    if network_manager is None:
        app_logger.error("OAuth clients are not initialized")
        return NetworkManager()
    return network_manager


SessionStoreDep = Annotated[RequestSessionStore, Depends(get_session_store)]
NetworkManagerDep = Annotated[NetworkManager, Depends(get_network_manager)]


def get_user_manager(session: SessionStoreDep) -> SessionUserManager:
    user_manager = SessionUserManager(
        session=session,
        user_session_key=settings.USER_SESSION_KEY,
        post_login_redirect_url=settings.POST_LOGIN_REDIRECT_URL,
        allowed_email_domains=settings.ALLOWED_EMAIL_DOMAINS,
    )
    user_manager.set_plugin_id(settings.SOCIAL_AUTH_PLUGIN_ID)
    # Cleared if the user could not be logged in
    user_manager.set_session_keys_to_nullify([settings.ACCESS_TOKEN_SESSION_KEY])
    return user_manager


UserManagerDep = Annotated[UserManager, Depends(get_user_manager)]


def get_authorization_initiator(
    provider: OAuthProviders,
    network_manager: NetworkManagerDep,
    session: SessionStoreDep,
) -> AuthorizationInitiator:
    return AuthorizationInitiator(
        network_manager=network_manager,
        session=session,
        provider_key=provider.value,
        state_enabled=settings.OAUTH_STATE_ENABLED,
        state_session_key=settings.OAUTH_STATE_SESSION_KEY,
    )


def get_callback_handler(
    provider: OAuthProviders,
    network_manager: NetworkManagerDep,
    user_manager: UserManagerDep,
    session: SessionStoreDep,
) -> CallbackHandler:
    return CallbackHandler(
        network_manager=network_manager,
        user_manager=user_manager,
        session=session,
        provider_key=provider.value,
        login_url=settings.LOGIN_URL,
        access_token_session_key=settings.ACCESS_TOKEN_SESSION_KEY,
        state_enabled=settings.OAUTH_STATE_ENABLED,
        state_session_key=settings.OAUTH_STATE_SESSION_KEY,
    )


AuthorizationInitiatorDep = Annotated[
    AuthorizationInitiator, Depends(get_authorization_initiator)
]
CallbackHandlerDep = Annotated[CallbackHandler, Depends(get_callback_handler)]


__all__ = [
    "get_session_store",
    "get_network_manager",
    "get_user_manager",
    "get_authorization_initiator",
    "get_callback_handler",
    "SessionStoreDep",
    "NetworkManagerDep",
    "UserManagerDep",
    "AuthorizationInitiatorDep",
    "CallbackHandlerDep",
]
