"""
User provisioning for social login.

The login flow hands the verified provider identity to a ``UserManager``
and returns whatever response it produces. ``SessionUserManager`` is the
default: it keeps the logged-in identity in the session and does not
store user records anywhere else.
"""

from typing import Iterable, Protocol

from fastapi import status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from social_auth.core.config import auth_logger
from social_auth.core.exceptions.types import UserProvisioningException
from social_auth.core.services.session import SessionStore


class UserManager(Protocol):
    """Login-or-register collaborator for the OAuth callback."""

    async def authenticate_user(
        self,
        email: str,
        name: str | None,
        external_id: str,
        picture_url: str | None,
    ) -> Response: ...


class SessionUserManager:
    """
    Logs the provider identity into the current session.

    Args:
        session: Session of the current request.
        user_session_key: Key the logged-in user is stored under.
        post_login_redirect_url: Where to send the browser after login.
        allowed_email_domains: If not empty, only these email domains
            may log in.
    """

    def __init__(
        self,
        session: SessionStore,
        user_session_key: str,
        post_login_redirect_url: str = "/",
        allowed_email_domains: Iterable[str] = (),
    ) -> None:
        self._session = session
        self._user_session_key = user_session_key
        self._post_login_redirect_url = post_login_redirect_url
        self._allowed_email_domains = {d.lower() for d in allowed_email_domains}
        self._plugin_id: str | None = None
        self._session_keys_to_nullify: list[str] = []

    @property
    def plugin_id(self) -> str | None:
        return self._plugin_id

    def set_plugin_id(self, plugin_id: str) -> None:
        self._plugin_id = plugin_id

    def set_session_keys_to_nullify(self, keys: Iterable[str]) -> None:
        """Keys to clear from the session when a login is refused."""
        self._session_keys_to_nullify = list(keys)

    def nullify_session_keys(self) -> None:
        for key in self._session_keys_to_nullify:
            self._session.remove(key)

    def _email_allowed(self, email: str) -> bool:
        if not self._allowed_email_domains:
            return True
        domain = email.rpartition("@")[2].lower()
        return domain in self._allowed_email_domains

    async def authenticate_user(
        self,
        email: str,
        name: str | None,
        external_id: str,
        picture_url: str | None,
    ) -> Response:
        """
        Log the user in and return the post-login redirect.

        Raises:
            UserProvisioningException: If the identity has no email or user
                id, or its email domain is not allowed. Session keys registered with
                ``set_session_keys_to_nullify`` are cleared first.
        """
        if not email:
            self.nullify_session_keys()
            raise UserProvisioningException(
                message="Provider identity has no email address"
            )

        if not external_id:
            self.nullify_session_keys()
            raise UserProvisioningException(
                message="Provider identity has no user id"
            )

        if not self._email_allowed(email):
            self.nullify_session_keys()
            auth_logger.warning(
                f"Login refused for {self._plugin_id}: email domain not allowed"
            )
            raise UserProvisioningException(
                message="Email domain is not allowed to log in"
            )

        self._session.set(
            self._user_session_key,
            {
                "plugin_id": self._plugin_id,
                "email": email,
                "name": name,
                "external_id": external_id,
                "picture": picture_url,
            },
        )
        auth_logger.info(
            f"User logged in via {self._plugin_id}: external_id={external_id}"
        )
        return RedirectResponse(
            url=self._post_login_redirect_url,
            status_code=status.HTTP_302_FOUND,
        )

    def logout(self) -> None:
        self._session.remove(self._user_session_key)
        self.nullify_session_keys()


__all__ = ["UserManager", "SessionUserManager"]
