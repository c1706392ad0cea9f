"""
Session access for the login flow.

The browser session is owned by starlette's SessionMiddleware; the login
code only reads and writes it through ``SessionStore``.
"""

from typing import Any, MutableMapping, Protocol

from social_auth.core.enums import MessageLevel


FLASH_MESSAGES_SESSION_KEY = "flash_messages"


class SessionStore(Protocol):
    """Key-value store scoped to one browser session."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class RequestSessionStore:
    """
    SessionStore over a request session mapping (``request.session``).

    Values must be JSON serializable since the session is stored in a
    signed cookie.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def get(self, key: str, default: Any = None) -> Any:
        return self._session.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._session[key] = value

    def remove(self, key: str) -> None:
        self._session.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._session


def add_flash_message(
    store: SessionStore,
    message: str,
    level: MessageLevel = MessageLevel.STATUS,
) -> None:
    """Queue a message to show on the next page the browser loads."""
    messages = list(store.get(FLASH_MESSAGES_SESSION_KEY) or [])
    messages.append({"message": message, "level": level.value})
    store.set(FLASH_MESSAGES_SESSION_KEY, messages)


def pop_flash_messages(store: SessionStore) -> list[dict[str, str]]:
    """Return queued messages and clear them."""
    messages = list(store.get(FLASH_MESSAGES_SESSION_KEY) or [])
    store.remove(FLASH_MESSAGES_SESSION_KEY)
    return messages


__all__ = [
    "FLASH_MESSAGES_SESSION_KEY",
    "SessionStore",
    "RequestSessionStore",
    "add_flash_message",
    "pop_flash_messages",
]
