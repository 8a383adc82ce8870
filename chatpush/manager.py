"""PushManager — composition root for push identity, registration and routing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chatpush.config import settings
from chatpush.identity.store import IdentityStore
from chatpush.notifications.background import TaskKeeper
from chatpush.notifications.center import NotificationCenterDelegate, setup_notification_center
from chatpush.notifications.router import PushNotificationRouter
from chatpush.registration.client import RegistrationClient

if TYPE_CHECKING:
    from chatpush.notifications.center import NotificationCenter
    from chatpush.notifications.collaborators import (
        ConversationLookup,
        ConversationView,
        MessageSender,
        ServerSwitcher,
    )
    from chatpush.registration.connection import AuthSession, BackendConnection
    from chatpush.servers.registry import ServerRegistry

logger = logging.getLogger(__name__)


class PushManager:
    """Owns the identity store, registration client and router for one process.

    Lifecycle events call in here: a refreshed device token, a login, a
    reconnect, and each notification the user interacts with.
    """

    def __init__(
        self,
        identity: IdentityStore,
        registration: RegistrationClient,
        router: PushNotificationRouter,
        keeper: TaskKeeper,
    ) -> None:
        self.identity = identity
        self.registration = registration
        self.router = router
        self.keeper = keeper
        self.delegate = NotificationCenterDelegate(router)

    async def setup(self, center: NotificationCenter) -> None:
        """Register categories and the delegate with the notification center."""
        await setup_notification_center(center, self.delegate)

    async def record_device_token(self, token: str) -> bool:
        """Store a token delivered by the platform and re-announce."""
        await self.identity.set_device_token(token)
        return await self.registration.announce_registration()

    async def on_login(self, user_id: str) -> bool:
        """Associate the new user with this installation and re-announce."""
        await self.registration.associate_user(user_id)
        return await self.registration.announce_registration()

    async def on_reconnect(self) -> bool:
        return await self.registration.announce_registration()

    async def handle_notification(
        self, payload: dict[str, Any], reply: str | None = None
    ) -> bool:
        return await self.router.handle_payload(payload, reply=reply)

    async def shutdown(self, timeout: float | None = None) -> bool:
        """Wait for in-flight replies. Returns False if some had to be expired."""
        if timeout is None:
            timeout = settings.reply_drain_timeout_seconds
        idle = await self.keeper.wait_idle(timeout)
        logger.info("Push manager stopped (idle=%s)", idle)
        return idle


def create_push_manager(
    *,
    connection: BackendConnection,
    auth: AuthSession,
    registry: ServerRegistry,
    conversations: ConversationLookup,
    switcher: ServerSwitcher,
    sender: MessageSender,
    view: ConversationView | None = None,
    identity: IdentityStore | None = None,
) -> PushManager:
    """Wire a ``PushManager`` from the application's collaborators."""
    identity = identity or IdentityStore.get()
    keeper = TaskKeeper()
    registration = RegistrationClient(identity, connection, auth)
    router = PushNotificationRouter(
        registry,
        conversations,
        switcher,
        sender,
        keeper,
        view=view,
    )
    return PushManager(identity, registration, router, keeper)
