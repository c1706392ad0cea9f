from typing import Annotated

from pydantic import BaseModel, Field

from social_auth.core.enums import MessageLevel


class MessageResponse(BaseModel):
    """A message queued for the user by an earlier request."""

    message: str
    level: MessageLevel = MessageLevel.STATUS


class SessionUserResponse(BaseModel):
    """The user logged in through social login, as kept in the session."""

    plugin_id: Annotated[
        str | None, Field(description="Login module that authenticated the user")
    ] = None
    email: Annotated[str, Field(description="Email address from the provider")]
    name: Annotated[str | None, Field(description="Display name")] = None
    external_id: Annotated[str, Field(description="Provider-assigned user id")]
    picture: Annotated[str | None, Field(description="Profile picture URL")] = None


class LoginPageResponse(BaseModel):
    """Login page state: pending messages and the current user, if any."""

    messages: list[MessageResponse] = []
    user: SessionUserResponse | None = None
    providers: Annotated[
        list[str], Field(description="Providers available for social login")
    ] = []


__all__ = [
    "MessageResponse",
    "SessionUserResponse",
    "LoginPageResponse",
]
