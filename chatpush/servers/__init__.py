"""Configured backend servers."""

from chatpush.servers.registry import ServerList, ServerRegistry
from chatpush.servers.urls import host_to_server_url

__all__ = [
    "ServerList",
    "ServerRegistry",
    "host_to_server_url",
]
