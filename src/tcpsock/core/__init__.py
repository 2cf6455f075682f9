"""Socket operations: factories, transfer primitives and lifecycle helpers."""

from __future__ import annotations

__all__ = [
    "KEEPALIVE_POLICY",
    "KeepAlivePolicy",
    "SocketHandle",
    "SocketSetupError",
    "TransferStatus",
    "apply_keepalive",
    "check_client_connections",
    "create_client_socket",
    "create_server_socket",
    "handle_client_disconnection",
    "read_keepalive",
    "recv_msg_blocking",
    "recv_msg_timeout",
    "send_message",
    "set_socket_buffer_size",
    "timeout_to_seconds",
]

from .client import create_client_socket
from .handle import KEEPALIVE_POLICY, KeepAlivePolicy, SocketHandle, SocketSetupError, TransferStatus
from .lifecycle import check_client_connections, handle_client_disconnection
from .server import apply_keepalive, create_server_socket, read_keepalive, set_socket_buffer_size
from .transfer import recv_msg_blocking, recv_msg_timeout, send_message, timeout_to_seconds
