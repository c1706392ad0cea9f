"""
Dependencies for the login endpoints.

"""

from social_auth.core.dependencies.auth import (
    AuthorizationInitiatorDep,
    CallbackHandlerDep,
    NetworkManagerDep,
    SessionStoreDep,
    UserManagerDep,
    get_authorization_initiator,
    get_callback_handler,
    get_network_manager,
    get_session_store,
    get_user_manager,
)

__all__ = [
    # Dependency functions
    "get_session_store",
    "get_network_manager",
    "get_user_manager",
    "get_authorization_initiator",
    "get_callback_handler",
    # Type aliases
    "SessionStoreDep",
    "NetworkManagerDep",
    "UserManagerDep",
    "AuthorizationInitiatorDep",
    "CallbackHandlerDep",
]
