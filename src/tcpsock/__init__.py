"""tcpsock: a minimal TCP connection-management layer.

Server and client socket factories, single-call transfer primitives and a
non-blocking liveness scan over caller-owned handle collections. The package
has no import-time side effects and configures no logging sinks; the CLI in
``tcpsock.main`` is the only place that does.
"""

from .const import EMPTY_SLOT, __version__
from .core import (
    KEEPALIVE_POLICY,
    KeepAlivePolicy,
    SocketHandle,
    SocketSetupError,
    TransferStatus,
    check_client_connections,
    create_client_socket,
    create_server_socket,
    handle_client_disconnection,
    read_keepalive,
    recv_msg_blocking,
    recv_msg_timeout,
    send_message,
    set_socket_buffer_size,
)
from .utils import is_port_available

__all__ = [
    "EMPTY_SLOT",
    "KEEPALIVE_POLICY",
    "KeepAlivePolicy",
    "SocketHandle",
    "SocketSetupError",
    "TransferStatus",
    "__version__",
    "check_client_connections",
    "create_client_socket",
    "create_server_socket",
    "handle_client_disconnection",
    "is_port_available",
    "read_keepalive",
    "recv_msg_blocking",
    "recv_msg_timeout",
    "send_message",
    "set_socket_buffer_size",
]
