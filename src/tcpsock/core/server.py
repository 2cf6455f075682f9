"""Server socket factory and socket option tuning."""

from __future__ import annotations

from collections.abc import Callable
import errno
import socket

from loguru import logger

from tcpsock.const import DEFAULT_BIND_HOST
from tcpsock.core.handle import KEEPALIVE_POLICY, KeepAlivePolicy, SocketHandle, SocketSetupError

# macOS exposes the idle option as TCP_KEEPALIVE
TCP_KEEPIDLE_OPTION: int | None = getattr(
    socket, "TCP_KEEPIDLE", getattr(socket, "TCP_KEEPALIVE", None)
)

_SETUP_ERRORS = (OSError, OverflowError, TypeError, ValueError)


def _enable_address_reuse(sock: socket.socket) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    if hasattr(socket, "SO_REUSEPORT"):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)


def apply_keepalive(sock: socket.socket, policy: KeepAlivePolicy = KEEPALIVE_POLICY) -> None:
    """Write ``policy`` onto ``sock``; raises ``OSError`` on failure."""

    if TCP_KEEPIDLE_OPTION is None:
        raise OSError(errno.ENOPROTOOPT, "TCP keep-alive idle option is not supported")

    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, int(policy.enabled))
    sock.setsockopt(socket.IPPROTO_TCP, TCP_KEEPIDLE_OPTION, policy.idle_seconds)
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, policy.interval_seconds)
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPCNT, policy.probe_count)


def read_keepalive(handle: SocketHandle) -> KeepAlivePolicy:
    """Read the keep-alive settings currently applied to ``handle``."""

    if TCP_KEEPIDLE_OPTION is None:
        raise OSError(errno.ENOPROTOOPT, "TCP keep-alive idle option is not supported")

    sock = handle.socket
    return KeepAlivePolicy(
        enabled=bool(sock.getsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE)),
        idle_seconds=sock.getsockopt(socket.IPPROTO_TCP, TCP_KEEPIDLE_OPTION),
        interval_seconds=sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL),
        probe_count=sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPCNT),
    )


def create_server_socket(port: int, max_clients: int) -> SocketHandle:
    """Create a listening TCP socket on all local interfaces.

    The socket is configured for immediate rebinding (``SO_REUSEADDR`` and,
    where available, ``SO_REUSEPORT``) and carries the fixed keep-alive
    policy. Any failing step closes the socket and raises
    ``SocketSetupError`` naming the step; a partially configured socket is
    never returned.
    """

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        logger.error(f"Socket failed: {exc}")
        raise SocketSetupError(f"Socket failed: {exc}", step="socket", port=port) from exc

    steps: tuple[tuple[str, Callable[[], None]], ...] = (
        ("address reuse", lambda: _enable_address_reuse(sock)),
        ("keep-alive", lambda: apply_keepalive(sock)),
        ("bind", lambda: sock.bind((DEFAULT_BIND_HOST, port))),
        ("listen", lambda: sock.listen(max_clients)),
    )
    for step, action in steps:
        try:
            action()
        except _SETUP_ERRORS as exc:
            sock.close()
            message = f"{step.capitalize()} failed on port {port}: {exc}"
            logger.error(message)
            raise SocketSetupError(message, step=step, port=port) from exc

    handle = SocketHandle(sock)
    logger.debug(f"Listening on port {handle.local_port} (backlog={max_clients})")
    return handle


def set_socket_buffer_size(
    handle: SocketHandle, rx_bytes: int | None, tx_bytes: int | None
) -> None:
    """Set the kernel receive and transmit buffer sizes for ``handle``.

    A side passed as ``None`` keeps its current kernel size. Raises
    ``SocketSetupError`` when either option cannot be applied.
    """

    for step, option, size in (
        ("receive buffer", socket.SO_RCVBUF, rx_bytes),
        ("send buffer", socket.SO_SNDBUF, tx_bytes),
    ):
        if size is None:
            continue
        try:
            handle.socket.setsockopt(socket.SOL_SOCKET, option, size)
        except _SETUP_ERRORS as exc:
            message = f"Setting {step} size to {size} failed: {exc}"
            logger.error(message)
            raise SocketSetupError(message, step=step) from exc
