from fastapi import status


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class ConfigurationException(AppException):
    """Exception raised when the OAuth client is not configured."""

    def __init__(self, message: str = "Social login is not configured."):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class OAuthException(AppException):
    """Exception raised for OAuth-related errors."""

    def __init__(self, message: str = "OAuth authentication failed."):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ProviderException(OAuthException):
    """Exception raised when the authorization code exchange fails."""

    def __init__(self, message: str = "OAuth token exchange failed."):
        super().__init__(message)


class ProfileFetchException(OAuthException):
    """Exception raised when the provider rejects the token or returns no identity."""

    def __init__(self, message: str = "Failed to retrieve user profile."):
        super().__init__(message)


class InvalidStateException(OAuthException):
    """Exception raised when OAuth state parameter is invalid."""

    def __init__(self, message: str = "Invalid state parameter."):
        super().__init__(message)


class UserProvisioningException(AppException):
    """Exception raised when a user cannot be logged in or registered."""

    def __init__(self, message: str = "User could not be logged in."):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


__all__ = [
    "AppException",
    "ConfigurationException",
    "OAuthException",
    "ProviderException",
    "ProfileFetchException",
    "InvalidStateException",
    "UserProvisioningException",
]
