from enum import Enum


class OAuthProviders(str, Enum):
    """Supported OAuth providers for social login."""

    GOOGLE = "google"


class CallbackState(str, Enum):
    """States of the OAuth callback flow."""

    PENDING = "pending"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"  # terminal success
    FAILED = "failed"  # terminal failure


class MessageLevel(str, Enum):
    """Severity of a flash message shown on the next page."""

    STATUS = "status"
    WARNING = "warning"
    ERROR = "error"
