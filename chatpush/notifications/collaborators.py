"""Protocols for the application pieces the push router drives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chatpush.notifications.models import Conversation


@runtime_checkable
class ConversationLookup(Protocol):
    """Finds the conversation a notification refers to."""

    async def notification_conversation(self, room_id: str) -> Conversation | None:
        """Return the conversation for *room_id* on the backend, or None."""
        ...


@runtime_checkable
class ServerSwitcher(Protocol):
    """Application-level backend switching."""

    def change_selected_server(self, index: int) -> None:
        """Request a switch to backend *index*. Must not block on completion."""
        ...


@runtime_checkable
class ConversationView(Protocol):
    """The currently visible conversation screen."""

    def set_active_conversation(self, conversation: Conversation) -> None:
        """Show *conversation*."""
        ...


@runtime_checkable
class MessageSender(Protocol):
    """Messaging layer used to post replies."""

    async def post_message(self, conversation: Conversation, text: str) -> bool:
        """Post *text* to *conversation*. Returns True on success."""
        ...
