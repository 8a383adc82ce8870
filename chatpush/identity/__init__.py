"""Durable push registration identity."""

from chatpush.identity.models import PushIdentity, make_registration_id
from chatpush.identity.store import IdentityStore

__all__ = [
    "IdentityStore",
    "PushIdentity",
    "make_registration_id",
]
