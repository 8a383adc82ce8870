"""Normalization of server addresses into websocket connection URLs."""

from __future__ import annotations

from urllib.parse import urlsplit

_SECURE_SCHEMES = {"https": "wss", "wss": "wss"}
_INSECURE_SCHEMES = {"http": "ws", "ws": "ws"}
_DEFAULT_PORTS = {"wss": 443, "ws": 80}
_SOCKET_PATH = "/websocket"


def host_to_server_url(host: str) -> str | None:
    """Translate a server address into the canonical connection URL.

    ``https://chat.example.com/`` and ``chat.example.com`` both become
    ``wss://chat.example.com/websocket``; ``http``/``ws`` map to ``ws``.
    Returns None when *host* cannot be read as a server address.
    """
    raw = (host or "").strip()
    if not raw:
        return None
    if "://" not in raw:
        raw = f"https://{raw}"

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    socket_scheme = _SECURE_SCHEMES.get(scheme) or _INSECURE_SCHEMES.get(scheme)
    if socket_scheme is None or not parts.hostname:
        return None

    hostname = parts.hostname
    if ":" in hostname:
        hostname = f"[{hostname}]"
    if port == _DEFAULT_PORTS[socket_scheme]:
        port = None
    netloc = f"{hostname}:{port}" if port is not None else hostname

    path = parts.path.rstrip("/")
    if path.endswith(_SOCKET_PATH):
        path = path[: -len(_SOCKET_PATH)].rstrip("/")

    return f"{socket_scheme}://{netloc}{path}{_SOCKET_PATH}"
