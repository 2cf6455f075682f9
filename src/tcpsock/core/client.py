"""Client socket factory."""

from __future__ import annotations

import socket

from loguru import logger

from tcpsock.core.handle import SocketHandle


def create_client_socket(address: str, port: int) -> SocketHandle | None:
    """Connect to ``(address, port)`` and return the connected handle.

    ``address`` must be a numeric IPv4 string. Client-side failures are
    routine (unreachable peer, refused connection) so they are logged and
    reported by returning ``None`` rather than raising.
    """

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        logger.error(f"Socket creation error: {exc}")
        return None

    try:
        socket.inet_pton(socket.AF_INET, address)
    except (OSError, TypeError) as exc:
        sock.close()
        logger.error(f"Invalid address/ Address not supported: {address!r} ({exc})")
        return None

    try:
        sock.connect((address, port))
    except (OSError, OverflowError, TypeError) as exc:
        sock.close()
        logger.error(f"Connection to {address}:{port} failed: {exc}")
        return None

    return SocketHandle(sock)
