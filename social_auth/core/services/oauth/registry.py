"""Registry of configured OAuth clients, keyed by provider."""

from social_auth.core.config import Settings, auth_logger
from social_auth.core.enums import OAuthProviders
from social_auth.core.exceptions.types import ConfigurationException
from social_auth.core.services.oauth.base import BaseOAuthProvider, OAuthClientConfig
from social_auth.core.services.oauth.google import GoogleOAuthService


__all__ = ["NetworkManager", "build_network_manager"]


class NetworkManager:
    """
    Holds one configured OAuth client per provider key.

    Example:
        >>> manager = NetworkManager()
        >>> manager.register("google", GoogleOAuthService(config))
        >>> sdk = manager.get_sdk("google")
    """

    def __init__(self) -> None:
        self._sdks: dict[str, BaseOAuthProvider] = {}

    def register(self, provider_key: str, sdk: BaseOAuthProvider) -> None:
        self._sdks[provider_key] = sdk

    def providers(self) -> list[str]:
        return list(self._sdks)

    def get_sdk(self, provider_key: str) -> BaseOAuthProvider:
        """
        Return the OAuth client registered for ``provider_key``.

        Raises:
            ConfigurationException: If no client is registered for the key.
        """
        try:
            return self._sdks[provider_key]
        except KeyError:
            raise ConfigurationException(
                message=f"No OAuth client registered for provider '{provider_key}'"
            ) from None

    async def init(self) -> None:
        for sdk in self._sdks.values():
            await sdk.init()

    async def aclose(self) -> None:
        for sdk in self._sdks.values():
            await sdk.aclose()


def build_network_manager(settings: Settings) -> NetworkManager:
    """
    Build the registry from application settings.

    Incomplete credentials are reported here but only fail the login
    routes, so the rest of the application can still start.
    """
    manager = NetworkManager()
    google_config = OAuthClientConfig(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
        scopes=tuple(settings.GOOGLE_SCOPES),
    )
    try:
        google_config.validate()
    except ConfigurationException as e:
        auth_logger.error(f"Google login disabled: {e.message}")
    manager.register(
        OAuthProviders.GOOGLE.value,
        GoogleOAuthService(google_config, timeout=settings.OAUTH_HTTP_TIMEOUT_SECONDS),
    )
    return manager
