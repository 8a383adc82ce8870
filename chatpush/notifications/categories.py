"""Notification categories registered with the platform at startup."""

from __future__ import annotations

from dataclasses import dataclass, field

REPLY_ACTION_ID = "REPLY"
MESSAGE_CATEGORY_ID = "MESSAGE"
MESSAGE_NO_REPLY_CATEGORY_ID = "MESSAGE_NO_REPLY"

# Presentation options requested at setup and used for foreground delivery
AUTHORIZATION_OPTIONS = ("alert", "sound", "badge")
FOREGROUND_PRESENTATION = ("alert", "sound")


@dataclass(frozen=True)
class NotificationAction:
    """An action button offered on a delivered notification."""

    identifier: str
    title: str
    text_input: bool = False
    authentication_required: bool = False


@dataclass(frozen=True)
class NotificationCategory:
    """A named set of actions the platform renders for a notification."""

    identifier: str
    actions: tuple[NotificationAction, ...] = field(default_factory=tuple)

    @property
    def allows_reply(self) -> bool:
        return any(action.text_input for action in self.actions)


REPLY_ACTION = NotificationAction(
    identifier=REPLY_ACTION_ID,
    title="Reply",
    text_input=True,
    authentication_required=True,
)

MESSAGE_CATEGORY = NotificationCategory(MESSAGE_CATEGORY_ID, (REPLY_ACTION,))
MESSAGE_NO_REPLY_CATEGORY = NotificationCategory(MESSAGE_NO_REPLY_CATEGORY_ID)


def default_categories() -> list[NotificationCategory]:
    """Categories registered at startup: with and without inline reply."""
    return [MESSAGE_CATEGORY, MESSAGE_NO_REPLY_CATEGORY]
