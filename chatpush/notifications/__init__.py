"""Inbound push notification routing."""

from chatpush.notifications.background import BackgroundExecution, TaskKeeper
from chatpush.notifications.errors import (
    MalformedPayload,
    RoutingError,
    UnknownServer,
    UnresolvableConversation,
)
from chatpush.notifications.models import Conversation, ConversationKind, NotificationEvent
from chatpush.notifications.router import PushNotificationRouter, compose_reply

__all__ = [
    "BackgroundExecution",
    "Conversation",
    "ConversationKind",
    "MalformedPayload",
    "NotificationEvent",
    "PushNotificationRouter",
    "RoutingError",
    "TaskKeeper",
    "UnknownServer",
    "UnresolvableConversation",
    "compose_reply",
]
