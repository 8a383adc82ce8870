"""Push registration announcements."""

from chatpush.registration.client import RegistrationClient
from chatpush.registration.connection import AuthSession, BackendConnection

__all__ = [
    "AuthSession",
    "BackendConnection",
    "RegistrationClient",
]
