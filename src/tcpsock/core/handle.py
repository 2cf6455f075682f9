"""Connection handle and outcome types shared by the socket operations."""

from __future__ import annotations

from dataclasses import dataclass
import enum
import socket

from tcpsock.const import (
    KEEPALIVE_ENABLED,
    KEEPALIVE_IDLE_SECONDS,
    KEEPALIVE_INTERVAL_SECONDS,
    KEEPALIVE_PROBE_COUNT,
)


class SocketSetupError(RuntimeError):
    """Raised when a server socket or its options cannot be configured."""

    def __init__(self, message: str, *, step: str, port: int | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.port = port


class TransferStatus(enum.Enum):
    """Non-data outcomes of the transfer primitives.

    Members never compare equal to an ``int``, so a byte count (including
    ``0``) is always distinguishable from these sentinels.
    """

    TIMEOUT = "timeout"
    DISCONNECTED = "disconnected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class KeepAlivePolicy:
    """TCP keep-alive settings for a listening socket.

    Attributes:
        enabled: whether SO_KEEPALIVE is set
        idle_seconds: idle time before the first probe
        interval_seconds: time between probes
        probe_count: unanswered probes before the peer is declared dead

    """

    enabled: bool = KEEPALIVE_ENABLED
    idle_seconds: int = KEEPALIVE_IDLE_SECONDS
    interval_seconds: int = KEEPALIVE_INTERVAL_SECONDS
    probe_count: int = KEEPALIVE_PROBE_COUNT


KEEPALIVE_POLICY = KeepAlivePolicy()


class SocketHandle:
    """Opaque reference to a listening or connected TCP socket.

    Handles are produced by the factory functions and owned by the caller.
    ``fileno()`` makes a handle usable directly with ``select``.
    """

    __slots__ = ("_sock",)

    def __init__(self, sock: socket.socket) -> None:
        if not isinstance(sock, socket.socket):
            raise TypeError(f"SocketHandle requires a socket.socket, got {type(sock).__name__}")
        self._sock = sock

    def __repr__(self) -> str:
        return f"SocketHandle(fd={self.fileno()})"

    @property
    def socket(self) -> socket.socket:
        """Return the underlying socket object."""

        return self._sock

    @property
    def closed(self) -> bool:
        """Return True once the handle has been closed."""

        return self._sock.fileno() == -1

    @property
    def local_port(self) -> int:
        """Return the locally bound port (useful after binding port 0)."""

        return int(self._sock.getsockname()[1])

    def fileno(self) -> int:
        return self._sock.fileno()

    def accept(self) -> tuple[SocketHandle, tuple[str, int]]:
        """Accept a pending connection on a listening handle."""

        conn, addr = self._sock.accept()
        return SocketHandle(conn), addr

    def close(self) -> None:
        self._sock.close()
