"""
Social login router.

This module provides endpoints for:
- Redirecting the browser to the provider's consent page
- Completing the login on the provider callback
- The login page the flow falls back to on failure
- Logging out

All endpoints are prefixed with /user when mounted in the main app.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from social_auth.core.config import auth_logger, settings
from social_auth.core.dependencies import (
    AuthorizationInitiatorDep,
    CallbackHandlerDep,
    SessionStoreDep,
    get_user_manager,
)
from social_auth.core.enums import OAuthProviders
from social_auth.core.schemas.auth import (
    LoginPageResponse,
    MessageResponse,
    SessionUserResponse,
)
from social_auth.core.services.session import pop_flash_messages
from social_auth.core.services.user_manager import SessionUserManager


router = APIRouter()


@router.get(
    "/login",
    response_model=LoginPageResponse,
    summary="Login page",
)
async def login_page(request: Request, session: SessionStoreDep) -> LoginPageResponse:
    """
    Return the login page state.

    Messages queued by earlier requests (for example a failed social
    login) are returned once and then cleared.
    """
    network_manager = getattr(request.app.state, "network_manager", None)
    user = session.get(settings.USER_SESSION_KEY)
    return LoginPageResponse(
        messages=[MessageResponse(**m) for m in pop_flash_messages(session)],
        user=SessionUserResponse(**user) if user else None,
        providers=network_manager.providers() if network_manager else [],
    )


@router.get(
    "/logout",
    summary="Log out",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def logout(
    user_manager: Annotated[SessionUserManager, Depends(get_user_manager)],
) -> RedirectResponse:
    """Forget the logged-in user and the provider access token."""
    user_manager.logout()
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


@router.get(
    "/login/{provider}",
    summary="Redirect to provider",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    description="""
## Start Social Login

Redirects the browser to the provider's consent page, asking for the
configured scopes (`email` and `profile` by default).

After the user grants permission, the provider redirects to
`/user/login/{provider}/callback`.

### Errors

| Status | Scenario |
|--------|----------|
| `422` | Unknown provider |
| `500` | Client id, secret or redirect URI not configured |
""",
)
async def redirect_to_provider(
    provider: OAuthProviders,
    initiator: AuthorizationInitiatorDep,
) -> RedirectResponse:
    """
    Redirect to the provider authorization page.

    Args:
        provider (OAuthProviders): The provider to log in with.
        initiator (AuthorizationInitiator): Builds the authorization URL.

    Returns:
        RedirectResponse: 302 to the provider.

    Raises:
        ConfigurationException: If the provider client is not configured.
    """
    return initiator.redirect()


@router.get(
    "/login/{provider}/callback",
    summary="Provider callback",
    response_model=None,
    responses={
        302: {
            "description": "Redirect into the application on success, "
            "or to the login page with an error message on failure",
        },
    },
    description="""
## Social Login Callback

1. Validates the CSRF state parameter
2. Exchanges the authorization code for an access token
3. Retrieves the user profile from the provider
4. Logs the user in (or registers them)

Every failure, including the user cancelling on the consent page
(`error=access_denied`), redirects to `/user/login` with the message
"You could not be authenticated, please contact the administrator".
""",
)
async def provider_callback(
    provider: OAuthProviders,
    handler: CallbackHandlerDep,
    code: Annotated[
        str | None, Query(description="Authorization code from provider")
    ] = None,
    state: Annotated[
        str | None, Query(description="State parameter for CSRF validation")
    ] = None,
    error: Annotated[
        str | None,
        Query(description="Error code from provider (e.g., access_denied)"),
    ] = None,
    error_description: Annotated[
        str | None, Query(description="Human-readable error description")
    ] = None,
) -> Response:
    """
    Complete the login.

    Returns:
        Response: The user manager's redirect on success, otherwise a
            302 to the login page.
    """
    result = await handler.handle_callback(
        {
            "code": code,
            "state": state,
            "error": error,
            "error_description": error_description,
        }
    )
    if not result.succeeded:
        auth_logger.info(f"Social login via {provider.value} failed: {result.error}")
    return result.response
