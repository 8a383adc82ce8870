"""Push service entry point."""

import asyncio
import logging

from chatpush.config import settings
from chatpush.manager import PushManager
from chatpush.webhooks.server import PushWebhookServer

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


async def serve(manager: PushManager, port: int | None = None) -> None:
    """Run the push webhook server until cancelled.

    The host application builds *manager* with ``create_push_manager`` from
    its own connection, database and UI collaborators.
    """
    server = PushWebhookServer(manager, port=port)
    await server.start()
    if not server.running:
        logger.warning("Nothing to serve — set WEBHOOK_SECRET to enable push intake")
        return

    await manager.on_reconnect()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()
