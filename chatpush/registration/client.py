"""RegistrationClient — announces push registration over the active connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chatpush.registration.messages import build_push_setuser, build_push_update

if TYPE_CHECKING:
    from chatpush.identity.store import IdentityStore
    from chatpush.registration.connection import AuthSession, BackendConnection

logger = logging.getLogger(__name__)


class RegistrationClient:
    """Sends push registration calls, fire-and-forget.

    Nothing here retries. A failed send is logged and reported as ``False``;
    the owner re-announces on the next token refresh, login or reconnect.
    """

    def __init__(
        self,
        identity: IdentityStore,
        connection: BackendConnection,
        auth: AuthSession,
        *,
        app_name: str | None = None,
    ) -> None:
        self._identity = identity
        self._connection = connection
        self._auth = auth
        self._app_name = app_name

    async def announce_registration(self) -> bool:
        """Announce the registration id, user and token to the backend.

        No-op returning False unless both a device token and an
        authenticated user exist. Returns True once the call was sent.
        """
        identity = await self._identity.get_identity()
        if not identity.has_token:
            logger.debug("Push announce skipped: no device token")
            return False

        user_id = self._auth.current_user_id()
        if not user_id:
            logger.debug("Push announce skipped: not authenticated")
            return False

        request = build_push_update(
            identity.registration_id,
            user_id,
            identity.device_token,
            app_name=self._app_name,
        )
        return await self._send(request, "push-update")

    async def associate_user(self, user_id: str) -> bool:
        """Associate *user_id* with this installation's registration id."""
        registration_id = await self._identity.get_or_create_registration_id()
        request = build_push_setuser(registration_id, user_id)
        return await self._send(request, "push-setuser")

    async def _send(self, request: dict[str, Any], label: str) -> bool:
        try:
            sent = await self._connection.send(request)
        except Exception:
            logger.exception("Push %s send failed", label)
            return False
        if not sent:
            logger.warning("Push %s not sent: connection refused the message", label)
            return False
        logger.info("Push %s sent", label)
        return True
