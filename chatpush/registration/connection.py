"""Protocols for the collaborators the registration client talks through."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BackendConnection(Protocol):
    """The active backend connection's send primitive."""

    async def send(self, message: dict[str, Any]) -> bool:
        """Write one message to the connection. Returns True if it was sent.

        No acknowledgement from the backend is awaited.
        """
        ...


@runtime_checkable
class AuthSession(Protocol):
    """Source of the currently authenticated user."""

    def current_user_id(self) -> str | None:
        """Return the authenticated user's id, or None when logged out."""
        ...
