"""Disconnect handling and the batch liveness scan over tracked handles."""

from __future__ import annotations

from collections.abc import MutableSequence
import socket

from loguru import logger

from tcpsock.const import EMPTY_SLOT
from tcpsock.core.handle import SocketHandle

_PEEK_FLAGS = socket.MSG_PEEK | socket.MSG_DONTWAIT


def handle_client_disconnection(handle: SocketHandle) -> None:
    """Close ``handle`` and log the teardown.

    Closing an already-closed handle must be prevented by the caller.
    """

    logger.info(f"Client disconnected, closing socket {handle.fileno()}")
    handle.close()


def check_client_connections(
    handles: MutableSequence[SocketHandle | None], max_clients: int
) -> int:
    """Prune tracked handles whose peer has completed an orderly close.

    Performs a single non-blocking pass over the first ``max_clients`` slots,
    peeking one byte without consuming it. Only a zero-byte peek (orderly
    shutdown) closes the handle and resets its slot to ``EMPTY_SLOT``; slots
    that would block, have pending data, or report an error are left as-is.
    Returns the number of slots pruned.
    """

    pruned = 0
    for index in range(min(max_clients, len(handles))):
        handle = handles[index]
        if handle is EMPTY_SLOT:
            continue
        try:
            peeked = handle.socket.recv(1, _PEEK_FLAGS)
        except OSError:
            continue
        if peeked == b"":
            logger.info(f"Client socket {handle.fileno()} appears to have disconnected")
            handle_client_disconnection(handle)
            handles[index] = EMPTY_SLOT
            pruned += 1
    return pruned
