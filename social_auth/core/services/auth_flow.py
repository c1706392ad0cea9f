"""
OAuth 2.0 authorization code flow for social login.

Two steps, one per route:
- AuthorizationInitiator: builds the provider authorization URL and
  redirects the browser to it.
- CallbackHandler: exchanges the authorization code for an access token,
  fetches the user's profile and hands it to the user manager.

Example usage:
    initiator = AuthorizationInitiator(network_manager, session, "google")
    return initiator.redirect()

    handler = CallbackHandler(network_manager, user_manager, session, "google")
    result = await handler.handle_callback(dict(request.query_params))
    return result.response
"""

from dataclasses import dataclass
from typing import Mapping

from fastapi import status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from social_auth.core.config import auth_logger, settings
from social_auth.core.enums import CallbackState, MessageLevel
from social_auth.core.exceptions.types import (
    AppException,
    InvalidStateException,
    ProfileFetchException,
)
from social_auth.core.services.oauth import (
    AuthorizationRequest,
    NetworkManager,
    OAuthStateManager,
    OAuthUserInfo,
    generate_state,
)
from social_auth.core.services.session import SessionStore, add_flash_message
from social_auth.core.services.user_manager import UserManager


AUTHENTICATION_FAILED_MESSAGE = (
    "You could not be authenticated, please contact the administrator"
)


@dataclass
class AuthResult:
    """
    Outcome of an OAuth callback.

    Attributes:
        state: Terminal state, PROFILE_FETCHED or FAILED.
        response: Response to return to the browser.
        user_info: Profile handed to the user manager, on success.
        error: Why the login failed, on failure. Not shown to the user.
    """

    state: CallbackState
    response: Response
    user_info: OAuthUserInfo | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == CallbackState.PROFILE_FETCHED


class AuthorizationInitiator:
    """Starts the login by redirecting to the provider's consent page."""

    def __init__(
        self,
        network_manager: NetworkManager,
        session: SessionStore,
        provider_key: str,
        state_enabled: bool = settings.OAUTH_STATE_ENABLED,
        state_session_key: str = settings.OAUTH_STATE_SESSION_KEY,
    ) -> None:
        self._network_manager = network_manager
        self._session = session
        self._provider_key = provider_key
        self._state_enabled = state_enabled
        self._state_session_key = state_session_key

    def begin_authorization(self) -> AuthorizationRequest:
        """
        Build the provider authorization URL.

        When state protection is on, a fresh nonce is stored in the session
        and a signed state carrying it is added to the URL.

        Returns:
            AuthorizationRequest: The URL and the state issued with it.

        Raises:
            ConfigurationException: If the provider is unknown or its client
                id, secret, redirect URI or scopes are missing.
        """
        sdk = self._network_manager.get_sdk(self._provider_key)
        sdk.config.validate()

        state = None
        if self._state_enabled:
            nonce = generate_state(16)
            state = OAuthStateManager.encode_state(self._provider_key, nonce)
            self._session.set(self._state_session_key, nonce)

        url = sdk.get_authorization_url(state=state)
        auth_logger.info(f"Redirecting to {self._provider_key} for authorization")
        return AuthorizationRequest(url=url, state=state)

    def redirect(self) -> RedirectResponse:
        request = self.begin_authorization()
        return RedirectResponse(url=request.url, status_code=status.HTTP_302_FOUND)


class CallbackHandler:
    """
    Completes the login when the provider redirects back.

    The access token is kept in the session for other code that calls the
    provider API during the session. Every failure ends in the FAILED state:
    the token is removed again, a message is queued for the login page and
    the browser is redirected there. Nothing is retried.
    """

    def __init__(
        self,
        network_manager: NetworkManager,
        user_manager: UserManager,
        session: SessionStore,
        provider_key: str,
        login_url: str = settings.LOGIN_URL,
        access_token_session_key: str = settings.ACCESS_TOKEN_SESSION_KEY,
        state_enabled: bool = settings.OAUTH_STATE_ENABLED,
        state_session_key: str = settings.OAUTH_STATE_SESSION_KEY,
    ) -> None:
        self._network_manager = network_manager
        self._user_manager = user_manager
        self._session = session
        self._provider_key = provider_key
        self._login_url = login_url
        self._access_token_session_key = access_token_session_key
        self._state_enabled = state_enabled
        self._state_session_key = state_session_key

    async def handle_callback(self, params: Mapping[str, str | None]) -> AuthResult:
        """
        Run the callback state machine.

        Args:
            params: Callback query parameters (``code``, ``state``,
                ``error``, ``error_description``).

        Returns:
            AuthResult: PROFILE_FETCHED with the user manager's response
                unmodified, or FAILED with a redirect to the login page.
        """
        # The nonce is single-use whatever the outcome
        expected_nonce = self._session.get(self._state_session_key)
        self._session.remove(self._state_session_key)

        error = params.get("error")
        if error:
            auth_logger.info(
                f"OAuth callback: {self._provider_key} returned error: "
                f"{error} - {params.get('error_description')}"
            )
            return self._fail(f"Provider returned error: {error}")

        code = params.get("code")
        if not code:
            auth_logger.warning(
                f"OAuth callback: missing authorization code for {self._provider_key}"
            )
            return self._fail("Missing authorization code")

        if self._state_enabled and not OAuthStateManager.verify_state(
            params.get("state"), expected_nonce, self._provider_key
        ):
            auth_logger.warning(
                f"OAuth callback: invalid or expired state for {self._provider_key}"
            )
            return self._fail(InvalidStateException().message)

        flow_state = CallbackState.PENDING
        try:
            sdk = self._network_manager.get_sdk(self._provider_key)

            tokens = await sdk.exchange_code_for_tokens(code)
            flow_state = CallbackState.TOKEN_EXCHANGED
            self._session.set(self._access_token_session_key, tokens.access_token)

            user_info = await sdk.get_user_info(tokens.access_token)
            if user_info is None or not user_info.email:
                raise ProfileFetchException(
                    message=f"{self._provider_key} returned no user profile"
                )
            flow_state = CallbackState.PROFILE_FETCHED

            response = await self._user_manager.authenticate_user(
                *user_info.provisioning_fields()
            )

        except AppException as e:
            auth_logger.error(
                f"OAuth callback failed after {flow_state.value}: "
                f"{type(e).__name__}: {e.message}"
            )
            return self._fail(e.message)

        except Exception as e:
            auth_logger.error(
                f"OAuth callback failed unexpectedly after {flow_state.value}: "
                f"{type(e).__name__}: {e}"
            )
            return self._fail("OAuth authentication failed")

        return AuthResult(
            state=CallbackState.PROFILE_FETCHED,
            response=response,
            user_info=user_info,
        )

    def _fail(self, reason: str) -> AuthResult:
        self._session.remove(self._access_token_session_key)
        add_flash_message(
            self._session, AUTHENTICATION_FAILED_MESSAGE, MessageLevel.ERROR
        )
        return AuthResult(
            state=CallbackState.FAILED,
            response=RedirectResponse(
                url=self._login_url, status_code=status.HTTP_302_FOUND
            ),
            error=reason,
        )


__all__ = [
    "AUTHENTICATION_FAILED_MESSAGE",
    "AuthResult",
    "AuthorizationInitiator",
    "CallbackHandler",
]
