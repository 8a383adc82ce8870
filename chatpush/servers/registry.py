"""Server registry — the configured backend connections and the selected one."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from chatpush.servers.urls import host_to_server_url

logger = logging.getLogger(__name__)


@runtime_checkable
class ServerRegistry(Protocol):
    """Ordered collection of backend connection URLs with one selected."""

    @property
    def selected_index(self) -> int:
        """Index of the currently active backend."""
        ...

    def index_for_url(self, url: str) -> int | None:
        """Return the index of the backend configured at *url*, or None."""
        ...


class ServerList:
    """In-memory ``ServerRegistry`` keyed by normalized connection URL."""

    def __init__(self, urls: list[str] | None = None) -> None:
        self._urls: list[str] = []
        self._selected = 0
        for url in urls or []:
            self.add_server(url)

    def add_server(self, address: str) -> int:
        """Normalize and append a server. Returns its index.

        Raises ValueError if the address is unreadable or already configured.
        """
        url = host_to_server_url(address)
        if url is None:
            msg = f"Not a server address: {address!r}"
            raise ValueError(msg)
        if url in self._urls:
            msg = f"Server '{url}' is already configured"
            raise ValueError(msg)
        self._urls.append(url)
        logger.info("Configured server %d: %s", len(self._urls) - 1, url)
        return len(self._urls) - 1

    def list_servers(self) -> list[str]:
        """Return the normalized URLs in configuration order."""
        return list(self._urls)

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def selected_url(self) -> str | None:
        if not self._urls:
            return None
        return self._urls[self._selected]

    def index_for_url(self, url: str) -> int | None:
        try:
            return self._urls.index(url)
        except ValueError:
            return None

    def select(self, index: int) -> None:
        """Mark *index* as the active backend. Raises IndexError if out of range."""
        if not 0 <= index < len(self._urls):
            msg = f"No server at index {index}"
            raise IndexError(msg)
        self._selected = index
        logger.info("Selected server %d: %s", index, self._urls[index])
