"""Shared test fixtures and fake collaborators."""

import asyncio
import json
from pathlib import Path

import pytest

from chatpush.identity.store import IdentityStore
from chatpush.notifications.models import Conversation, ConversationKind
from chatpush.notifications.router import PushNotificationRouter
from chatpush.servers.registry import ServerList

SERVER_A = "https://open.rocket.chat"
SERVER_B = "https://chat.example.com"

# -- Helpers -----------------------------------------------------------------


def make_payload(
    *,
    host: str = SERVER_A,
    username: str = "alice",
    kind: str = "p",
    rid: str = "room1",
    drop: tuple[str, ...] = (),
) -> dict:
    """Build a raw push payload, optionally dropping metadata keys."""
    meta = {
        "host": host,
        "sender": {"_id": "u1", "username": username},
        "type": kind,
        "rid": rid,
        "messageType": "",
    }
    for key in drop:
        if key == "username":
            meta["sender"].pop("username")
        else:
            meta.pop(key)
    return {"ejson": json.dumps(meta), "aps": {"alert": "alice: hi"}}


class FakeConnection:
    """Records messages written to the backend connection."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.sent: list[dict] = []
        self.result = result
        self.error = error

    async def send(self, message: dict) -> bool:
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        return self.result


class FakeAuth:
    def __init__(self, user_id: str | None = "user-1") -> None:
        self.user_id = user_id

    def current_user_id(self) -> str | None:
        return self.user_id


class FakeConversations:
    """Conversation lookup backed by a dict."""

    def __init__(self, conversations: dict[str, Conversation] | None = None) -> None:
        self.conversations = conversations or {}
        self.lookups: list[str] = []

    async def notification_conversation(self, room_id: str) -> Conversation | None:
        self.lookups.append(room_id)
        return self.conversations.get(room_id)


class FakeSwitcher:
    def __init__(self) -> None:
        self.requests: list[int] = []

    def change_selected_server(self, index: int) -> None:
        self.requests.append(index)


class FakeView:
    def __init__(self) -> None:
        self.shown: list[Conversation] = []

    def set_active_conversation(self, conversation: Conversation) -> None:
        self.shown.append(conversation)


class FakeSender:
    """Message sender that can fail, raise, or hold until released."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.posts: list[tuple[Conversation, str]] = []
        self.result = result
        self.error = error
        self.gate: asyncio.Event | None = None

    async def post_message(self, conversation: Conversation, text: str) -> bool:
        self.posts.append((conversation, text))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeBackgroundHost:
    """Background task host that records begin/end calls."""

    def __init__(self) -> None:
        self.begun: list[int] = []
        self.ended: list[int] = []
        self.handlers: dict[int, object] = {}

    def begin_background_task(self, expiration_handler=None) -> int:
        task_id = len(self.begun) + 1
        self.begun.append(task_id)
        self.handlers[task_id] = expiration_handler
        return task_id

    def end_background_task(self, task_id: int) -> None:
        self.ended.append(task_id)

    def expire(self, task_id: int) -> None:
        self.handlers[task_id]()


# -- Fixtures ----------------------------------------------------------------


@pytest.fixture
def identity(tmp_path: Path) -> IdentityStore:
    """IdentityStore backed by a temp database."""
    IdentityStore._reset()
    yield IdentityStore(db_path=tmp_path / "identity.db")
    IdentityStore._reset()


@pytest.fixture
def registry() -> ServerList:
    return ServerList([SERVER_A, SERVER_B])


@pytest.fixture
def conversations() -> FakeConversations:
    return FakeConversations({
        "room1": Conversation(id="room1", kind=ConversationKind.GROUP, name="general"),
        "dm1": Conversation(id="dm1", kind=ConversationKind.DIRECT),
        "chan1": Conversation(id="chan1", kind=ConversationKind.CHANNEL, name="news"),
    })


@pytest.fixture
def switcher() -> FakeSwitcher:
    return FakeSwitcher()


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def host() -> FakeBackgroundHost:
    return FakeBackgroundHost()


@pytest.fixture
def router(registry, conversations, switcher, sender, host, view) -> PushNotificationRouter:
    return PushNotificationRouter(
        registry, conversations, switcher, sender, host, view=view
    )
