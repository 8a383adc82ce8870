"""PushNotificationRouter — routes an inbound push to its server and conversation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from chatpush.notifications.background import BackgroundExecution
from chatpush.notifications.errors import (
    MalformedPayload,
    RoutingError,
    UnknownServer,
    UnresolvableConversation,
)
from chatpush.notifications.models import ConversationKind, NotificationEvent
from chatpush.servers.urls import host_to_server_url

if TYPE_CHECKING:
    from collections.abc import Mapping

    from chatpush.notifications.background import BackgroundTaskHost
    from chatpush.notifications.collaborators import (
        ConversationLookup,
        ConversationView,
        MessageSender,
        ServerSwitcher,
    )
    from chatpush.notifications.models import Conversation
    from chatpush.servers.registry import ServerRegistry

logger = logging.getLogger(__name__)


def compose_reply(reply: str, kind: ConversationKind, sender_username: str) -> str:
    """Build the outbound reply text.

    Outside direct conversations the sender is mentioned so the reply is
    addressed to them: ``"ok"`` from alice's message becomes ``"ok @alice"``.
    """
    if kind.is_direct:
        return reply
    return f"{reply} @{sender_username}"


class PushNotificationRouter:
    """Maps a notification to a backend and conversation, then focuses or switches.

    Every rejection is silent to the caller: the handle methods return
    False and the notification stays unread in the platform tray.
    """

    def __init__(
        self,
        registry: ServerRegistry,
        conversations: ConversationLookup,
        switcher: ServerSwitcher,
        sender: MessageSender,
        background: BackgroundTaskHost,
        view: ConversationView | None = None,
    ) -> None:
        self._registry = registry
        self._conversations = conversations
        self._switcher = switcher
        self._sender = sender
        self._background = background
        self._view = view
        self._reply_tasks: set[asyncio.Task[bool]] = set()
        self.last_notification_room_id: str | None = None

    @property
    def pending_replies(self) -> int:
        """Reply sends dispatched but not yet finished."""
        return len(self._reply_tasks)

    async def handle_payload(self, raw: Mapping[str, Any], reply: str | None = None) -> bool:
        """Parse *raw* and route it. Returns False if the payload is malformed."""
        try:
            event = NotificationEvent.from_payload(raw)
        except MalformedPayload as exc:
            logger.debug("Notification dropped: %s", exc)
            return False
        return await self.handle_notification(event, reply=reply)

    async def handle_notification(
        self, event: NotificationEvent, reply: str | None = None
    ) -> bool:
        """Route a parsed event, dispatching *reply* if given.

        Returns True once the switch or focus, and the reply send, have been
        started. The reply outcome is not part of the result.
        """
        try:
            index, conversation = await self._resolve(event)
        except RoutingError as exc:
            logger.info("Notification dropped: %s", exc)
            return False

        if index != self._registry.selected_index:
            logger.info(
                "Notification for server %d (selected %d): switching",
                index,
                self._registry.selected_index,
            )
            self._switcher.change_selected_server(index)
        elif self._view is not None:
            self._view.set_active_conversation(conversation)
        else:
            logger.debug("No conversation view to focus for %s", conversation.id)

        if reply is not None:
            text = compose_reply(reply, conversation.kind, event.sender_username)
            self._dispatch_reply(conversation, text)

        return True

    async def drain(self) -> list[bool]:
        """Wait for every in-flight reply send. Returns their results."""
        if not self._reply_tasks:
            return []
        results = await asyncio.gather(*self._reply_tasks, return_exceptions=True)
        return [result is True for result in results]

    # -- Internal helpers ------------------------------------------------------

    async def _resolve(self, event: NotificationEvent) -> tuple[int, Conversation]:
        server_url = host_to_server_url(event.host)
        if server_url is None:
            msg = f"Unreadable host {event.host!r}"
            raise UnknownServer(msg)

        index = self._registry.index_for_url(server_url)
        if index is None:
            msg = f"No configured server for {server_url}"
            raise UnknownServer(msg)

        self.last_notification_room_id = event.conversation_id
        try:
            conversation = await self._conversations.notification_conversation(
                event.conversation_id
            )
        except Exception as exc:
            logger.exception("Conversation lookup failed for %s", event.conversation_id)
            msg = f"Conversation {event.conversation_id} lookup failed on {server_url}"
            raise UnresolvableConversation(msg) from exc
        if conversation is None:
            msg = f"Conversation {event.conversation_id} not found on {server_url}"
            raise UnresolvableConversation(msg)

        return index, conversation

    def _dispatch_reply(self, conversation: Conversation, text: str) -> asyncio.Task[bool]:
        execution = BackgroundExecution(self._background, name=f"reply:{conversation.id}")
        task = asyncio.create_task(self._post_reply(conversation, text))
        self._reply_tasks.add(task)
        task.add_done_callback(self._reply_tasks.discard)
        task.add_done_callback(lambda _task: execution.release())
        return task

    async def _post_reply(self, conversation: Conversation, text: str) -> bool:
        try:
            sent = await self._sender.post_message(conversation, text)
        except Exception:
            logger.exception("Reply to %s failed", conversation.id)
            return False
        if not sent:
            logger.warning("Reply to %s was not delivered", conversation.id)
        return sent
