"""Lightweight async HTTP server for receiving push events.

A push relay posts notification interactions and device token refreshes
here; both are handed to the ``PushManager``.  Uses aiohttp's
AppRunner/TCPSite for non-blocking start/stop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web

from chatpush.config import settings

if TYPE_CHECKING:
    from chatpush.manager import PushManager

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Push-Secret"

manager_key: web.AppKey[PushManager] = web.AppKey("push_manager")


def _authorized(request: web.Request) -> bool:
    secret = request.headers.get(SECRET_HEADER, "")
    return bool(settings.webhook_secret) and secret == settings.webhook_secret


async def _read_json(request: web.Request) -> dict[str, Any] | None:
    try:
        payload = await request.json()
    except Exception:
        return None
    return payload if isinstance(payload, dict) else None


async def _handle_notification(request: web.Request) -> web.Response:
    """POST /push/notification — route a notification the user acted on."""
    if not _authorized(request):
        logger.warning("Push notification rejected: invalid secret")
        return web.json_response({"error": "unauthorized"}, status=401)

    body = await _read_json(request)
    if body is None:
        return web.json_response({"error": "invalid JSON"}, status=400)

    payload = body.get("payload")
    reply = body.get("reply")
    if not isinstance(payload, dict) or (reply is not None and not isinstance(reply, str)):
        return web.json_response({"error": "invalid body"}, status=400)

    handled = await request.app[manager_key].handle_notification(payload, reply=reply)
    return web.json_response({"handled": handled})


async def _handle_token(request: web.Request) -> web.Response:
    """POST /push/token — record a refreshed device token and re-announce."""
    if not _authorized(request):
        logger.warning("Push token update rejected: invalid secret")
        return web.json_response({"error": "unauthorized"}, status=401)

    body = await _read_json(request)
    if body is None:
        return web.json_response({"error": "invalid JSON"}, status=400)

    token = body.get("token")
    if not isinstance(token, str) or not token.strip():
        return web.json_response({"error": "missing token"}, status=400)

    announced = await request.app[manager_key].record_device_token(token.strip())
    return web.json_response({"announced": announced})


async def _health(request: web.Request) -> web.Response:
    """GET /health — basic liveness check."""
    return web.json_response({"status": "ok"})


def _create_web_app(manager: PushManager) -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application()
    app[manager_key] = manager
    app.router.add_get("/health", _health)
    app.router.add_post("/push/notification", _handle_notification)
    app.router.add_post("/push/token", _handle_token)
    return app


class PushWebhookServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(self, manager: PushManager, port: int | None = None) -> None:
        self.manager = manager
        self.port = port or settings.webhook_port
        self._runner: web.AppRunner | None = None

    @property
    def running(self) -> bool:
        return self._runner is not None

    async def start(self) -> None:
        """Start listening for push events."""
        if not settings.webhook_secret:
            logger.warning("WEBHOOK_SECRET empty — push webhook server disabled")
            return

        app = _create_web_app(self.manager)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "0.0.0.0", self.port)
        await site.start()
        logger.info("Push webhook server listening on port %d", self.port)

    async def stop(self) -> None:
        """Shut down the server, then let in-flight replies finish."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Push webhook server stopped")
        await self.manager.shutdown()
