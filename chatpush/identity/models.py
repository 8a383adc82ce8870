"""PushIdentity data model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

DEVICE_TOKEN_KEY = "deviceToken"
REGISTRATION_ID_KEY = "pushIdentifier"


@dataclass(frozen=True)
class PushIdentity:
    """Snapshot of the installation's push identity.

    Attributes:
        registration_id: Client-generated id the backend addresses this
            installation by. Never regenerated once stored.
        device_token: Last token delivered by the platform, or None.
    """

    registration_id: str
    device_token: str | None = None

    @property
    def has_token(self) -> bool:
        return bool(self.device_token)


def make_registration_id() -> str:
    """Generate a new registration id (32 hex chars, no separators)."""
    return uuid.uuid4().hex
