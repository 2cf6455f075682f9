"""Network-related helpers for tcpsock."""

from __future__ import annotations

import socket

from tcpsock.const import DEFAULT_BIND_HOST


def is_port_available(port: int, host: str = DEFAULT_BIND_HOST) -> bool:
    """Return True if a TCP port is free for binding on the given host.

    The probe mirrors the server factory's rebind semantics (``SO_REUSEADDR``)
    and is always closed before returning. A later bind failure remains
    authoritative: the port may be taken between this check and the bind.
    """
    try:
        probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        return False

    with probe:
        probe.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            probe.bind((host, port))
        except (OSError, OverflowError, TypeError):
            return False
    return True
