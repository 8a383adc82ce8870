"""Platform notification center wiring: setup and the delivery delegate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from chatpush.notifications.categories import (
    AUTHORIZATION_OPTIONS,
    FOREGROUND_PRESENTATION,
    default_categories,
)

if TYPE_CHECKING:
    from chatpush.notifications.categories import NotificationCategory
    from chatpush.notifications.router import PushNotificationRouter

logger = logging.getLogger(__name__)


@dataclass
class NotificationResponse:
    """A user's interaction with a delivered notification.

    Attributes:
        payload: The notification's raw user-info mapping.
        user_text: Text typed into an inline-reply action, if any.
    """

    payload: dict[str, Any] = field(default_factory=dict)
    user_text: str | None = None


@runtime_checkable
class NotificationCenter(Protocol):
    """The platform's notification facility."""

    def set_delegate(self, delegate: NotificationCenterDelegate) -> None: ...

    async def request_authorization(self, options: tuple[str, ...]) -> bool: ...

    def set_categories(self, categories: list[NotificationCategory]) -> None: ...


class NotificationCenterDelegate:
    """Receives deliveries and responses from the notification center."""

    def __init__(self, router: PushNotificationRouter) -> None:
        self._router = router

    def will_present(self, payload: dict[str, Any]) -> tuple[str, ...]:
        """Presentation options for a notification arriving in the foreground."""
        return FOREGROUND_PRESENTATION

    async def did_receive(self, response: NotificationResponse) -> bool:
        """Route the notification the user interacted with."""
        return await self._router.handle_payload(response.payload, reply=response.user_text)


async def setup_notification_center(
    center: NotificationCenter, delegate: NotificationCenterDelegate
) -> None:
    """Install the delegate, request authorization and register categories.

    The authorization result is logged, not acted on.
    """
    center.set_delegate(delegate)
    granted = await center.request_authorization(AUTHORIZATION_OPTIONS)
    logger.info("Notification authorization granted=%s", granted)
    center.set_categories(default_categories())
