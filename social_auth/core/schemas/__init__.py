"""
Schemas for response serialization.

"""

from social_auth.core.schemas.auth import (
    LoginPageResponse,
    MessageResponse,
    SessionUserResponse,
)

__all__ = [
    "LoginPageResponse",
    "MessageResponse",
    "SessionUserResponse",
]
