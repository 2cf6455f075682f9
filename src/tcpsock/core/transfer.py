"""Byte transfer primitives: send, blocking receive and bounded receive.

Each primitive issues exactly one underlying transfer call and reports the
outcome through its return value:

* a non-negative ``int`` is a byte count;
* :class:`~tcpsock.core.handle.TransferStatus` members mark non-data outcomes.

No call retries on partial or interrupted transfers; callers that need
all-bytes semantics loop themselves.
"""

from __future__ import annotations

import select

from loguru import logger

from tcpsock.const import DEFAULT_RECV_TIMEOUT_MS
from tcpsock.core.handle import SocketHandle, TransferStatus


def timeout_to_seconds(timeout_ms: int | float) -> float:
    """Convert a millisecond timeout into the seconds ``select`` expects.

    Negative values clamp to ``0.0`` (an immediate poll).
    """

    return max(0.0, timeout_ms / 1000.0)


def _resolve_length(buffer_len: int, length: int | None, *, receiving: bool) -> int:
    if length is None:
        length = buffer_len
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    if receiving and length > buffer_len:
        raise ValueError(f"length {length} exceeds buffer capacity {buffer_len}")
    return length


def _resolve_wait_length(buffer_len: int, length: int | None) -> int:
    size = _resolve_length(buffer_len, length, receiving=True)
    # A zero-byte read cannot tell an idle peer from a closed one
    if size == 0:
        raise ValueError("bounded receive needs a length of at least 1 byte")
    return size


def send_message(
    handle: SocketHandle, buffer: bytes | bytearray | memoryview, length: int | None = None
) -> int | TransferStatus:
    """Send up to ``length`` bytes of ``buffer`` in a single call.

    Returns the number of bytes actually sent, which may be fewer than
    requested, or ``TransferStatus.FAILED``.
    """

    view = memoryview(buffer)
    size = _resolve_length(view.nbytes, length, receiving=False)
    try:
        return handle.socket.send(view[:size])
    except OSError as exc:
        logger.error(f"send failed: {exc}")
        return TransferStatus.FAILED


def recv_msg_blocking(
    handle: SocketHandle, buffer: bytearray | memoryview, length: int | None = None
) -> int | TransferStatus:
    """Block until data arrives and read it into ``buffer``.

    Returns the byte count, ``0`` when the peer has shut down in an orderly
    way, or ``TransferStatus.FAILED``. A zero ``length`` (or empty buffer)
    returns ``0`` immediately without reading.
    """

    view = memoryview(buffer)
    size = _resolve_length(view.nbytes, length, receiving=True)
    try:
        return handle.socket.recv_into(view[:size], size)
    except OSError as exc:
        logger.error(f"recv failed: {exc}")
        return TransferStatus.FAILED


def recv_msg_timeout(
    handle: SocketHandle,
    buffer: bytearray | memoryview,
    length: int | None = None,
    timeout_ms: int = DEFAULT_RECV_TIMEOUT_MS,
) -> int | TransferStatus:
    """Wait up to ``timeout_ms`` for data, then read it into ``buffer``.

    Returns:
        the positive byte count on success;
        ``TransferStatus.TIMEOUT`` when nothing became readable in time;
        ``TransferStatus.DISCONNECTED`` when the read observed an orderly close;
        ``TransferStatus.FAILED`` when the wait or the read failed.

    Raises ``ValueError`` for a zero ``length`` or an empty buffer.
    """

    view = memoryview(buffer)
    size = _resolve_wait_length(view.nbytes, length)
    try:
        readable, _, _ = select.select([handle], [], [], timeout_to_seconds(timeout_ms))
    except (OSError, ValueError) as exc:
        logger.error(f"select error: {exc}")
        return TransferStatus.FAILED

    if not readable:
        logger.warning(f"Timeout: no data received within {timeout_ms} ms")
        return TransferStatus.TIMEOUT

    try:
        received = handle.socket.recv_into(view[:size], size)
    except OSError as exc:
        logger.error(f"recv failed: {exc}")
        return TransferStatus.FAILED

    if received == 0:
        return TransferStatus.DISCONNECTED
    return received
