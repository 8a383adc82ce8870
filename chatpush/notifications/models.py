"""Notification event and conversation models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from chatpush.notifications.errors import MalformedPayload

# Field carrying the backend's JSON-encoded metadata inside the raw payload
EJSON_FIELD = "ejson"


class ConversationKind(str, Enum):
    """Conversation classification, valued by its wire tag."""

    DIRECT = "d"
    GROUP = "p"
    CHANNEL = "c"
    LIVECHAT = "l"

    @classmethod
    def from_tag(cls, tag: str) -> ConversationKind:
        """Map a wire tag to a kind. Unrecognized tags fall back to GROUP."""
        try:
            return cls(tag)
        except ValueError:
            return cls.GROUP

    @property
    def is_direct(self) -> bool:
        return self is ConversationKind.DIRECT


@dataclass(frozen=True)
class Conversation:
    """A conversation as returned by the conversation lookup."""

    id: str
    kind: ConversationKind
    name: str = ""


class _Sender(BaseModel):
    model_config = ConfigDict(strict=True)

    username: str


class _PushMetadata(BaseModel):
    """The backend's metadata document. Unknown keys are ignored."""

    model_config = ConfigDict(strict=True)

    host: str
    sender: _Sender
    type: str
    rid: str


@dataclass(frozen=True)
class NotificationEvent:
    """A parsed inbound notification.

    Attributes:
        host: Server address the backend embedded at send time.
        sender_username: Username of the user who triggered the notification.
        conversation_id: Id of the conversation (``rid``).
        conversation_kind: Kind derived from the ``type`` tag.
    """

    host: str
    sender_username: str
    conversation_id: str
    conversation_kind: ConversationKind

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> NotificationEvent:
        """Parse a raw notification payload.

        Raises ``MalformedPayload`` if the metadata document is missing, is
        not a JSON object, or lacks any of host, sender username, type or rid.
        """
        document = raw.get(EJSON_FIELD) if isinstance(raw, Mapping) else None
        if not isinstance(document, (str, bytes)):
            msg = f"Payload has no {EJSON_FIELD!r} document"
            raise MalformedPayload(msg)

        try:
            meta = _PushMetadata.model_validate_json(document)
        except ValidationError as exc:
            msg = f"Invalid {EJSON_FIELD!r} document: {exc.error_count()} error(s)"
            raise MalformedPayload(msg) from exc

        return cls(
            host=meta.host,
            sender_username=meta.sender.username,
            conversation_id=meta.rid,
            conversation_kind=ConversationKind.from_tag(meta.type),
        )
