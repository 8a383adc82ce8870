"""Tests for the push webhook HTTP server."""

from unittest.mock import AsyncMock, patch

from aiohttp.test_utils import TestClient, TestServer
from conftest import make_payload

from chatpush.webhooks.server import PushWebhookServer, _create_web_app

TEST_SECRET = "test-secret-123"
HEADERS = {"X-Push-Secret": TEST_SECRET}


# -- Helpers -----------------------------------------------------------------


class _FakeSettings:
    def __init__(self, webhook_secret: str = TEST_SECRET, webhook_port: int = 8443) -> None:
        self.webhook_secret = webhook_secret
        self.webhook_port = webhook_port


def _make_manager(handled: bool = True, announced: bool = True) -> AsyncMock:
    manager = AsyncMock()
    manager.handle_notification = AsyncMock(return_value=handled)
    manager.record_device_token = AsyncMock(return_value=announced)
    return manager


async def _make_client(manager) -> TestClient:
    client = TestClient(TestServer(_create_web_app(manager)))
    await client.start_server()
    return client


# -- Health check -----------------------------------------------------------


async def test_health_check() -> None:
    client = await _make_client(_make_manager())
    try:
        resp = await client.get("/health")
        assert resp.status == 200
        assert (await resp.json())["status"] == "ok"
    finally:
        await client.close()


# -- Auth -------------------------------------------------------------------


async def test_rejects_missing_secret() -> None:
    manager = _make_manager()
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post("/push/notification", json={"payload": make_payload()})
            assert resp.status == 401
        finally:
            await client.close()
    manager.handle_notification.assert_not_awaited()


async def test_rejects_wrong_secret() -> None:
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(_make_manager())
        try:
            resp = await client.post(
                "/push/token", json={"token": "t"}, headers={"X-Push-Secret": "wrong"}
            )
            assert resp.status == 401
        finally:
            await client.close()


async def test_rejects_when_secret_unconfigured() -> None:
    with patch("chatpush.webhooks.server.settings", _FakeSettings(webhook_secret="")):
        client = await _make_client(_make_manager())
        try:
            resp = await client.post(
                "/push/notification", json={"payload": {}}, headers={"X-Push-Secret": ""}
            )
            assert resp.status == 401
        finally:
            await client.close()


# -- /push/notification -----------------------------------------------------


async def test_notification_routed_with_reply() -> None:
    manager = _make_manager(handled=True)
    payload = make_payload()
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post(
                "/push/notification",
                json={"payload": payload, "reply": "ok"},
                headers=HEADERS,
            )
            assert resp.status == 200
            assert await resp.json() == {"handled": True}
        finally:
            await client.close()
    manager.handle_notification.assert_awaited_once_with(payload, reply="ok")


async def test_notification_rejected_reports_false() -> None:
    manager = _make_manager(handled=False)
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post(
                "/push/notification", json={"payload": {"aps": {}}}, headers=HEADERS
            )
            assert resp.status == 200
            assert await resp.json() == {"handled": False}
        finally:
            await client.close()


async def test_notification_invalid_json() -> None:
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(_make_manager())
        try:
            resp = await client.post("/push/notification", data=b"not json", headers=HEADERS)
            assert resp.status == 400
        finally:
            await client.close()


async def test_notification_wrong_shape() -> None:
    manager = _make_manager()
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post(
                "/push/notification", json={"payload": "x", "reply": 3}, headers=HEADERS
            )
            assert resp.status == 400
        finally:
            await client.close()
    manager.handle_notification.assert_not_awaited()


# -- /push/token ------------------------------------------------------------


async def test_token_recorded() -> None:
    manager = _make_manager(announced=False)
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post("/push/token", json={"token": " tok-1 "}, headers=HEADERS)
            assert resp.status == 200
            assert await resp.json() == {"announced": False}
        finally:
            await client.close()
    manager.record_device_token.assert_awaited_once_with("tok-1")


async def test_token_missing() -> None:
    manager = _make_manager()
    with patch("chatpush.webhooks.server.settings", _FakeSettings()):
        client = await _make_client(manager)
        try:
            resp = await client.post("/push/token", json={"token": ""}, headers=HEADERS)
            assert resp.status == 400
        finally:
            await client.close()
    manager.record_device_token.assert_not_awaited()


# -- Lifecycle --------------------------------------------------------------


async def test_server_disabled_without_secret() -> None:
    manager = _make_manager()
    with patch("chatpush.webhooks.server.settings", _FakeSettings(webhook_secret="")):
        server = PushWebhookServer(manager, port=0)
        await server.start()
        assert server.running is False
        await server.stop()
    manager.shutdown.assert_awaited_once()
