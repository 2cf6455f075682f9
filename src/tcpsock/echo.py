"""Echo server built on the tcpsock primitives.

``EchoServer`` is a reference consumer of the library: it owns a listening
handle and a fixed table of client slots, drives them from a single-threaded
``select`` poll cycle, and runs the batch liveness scan on a timer.
"""

from __future__ import annotations

from dataclasses import dataclass
import select
import threading
import time

from loguru import logger

from tcpsock.config import TcpSockConfig
from tcpsock.const import EMPTY_SLOT
from tcpsock.core import (
    SocketHandle,
    SocketSetupError,
    TransferStatus,
    check_client_connections,
    create_server_socket,
    handle_client_disconnection,
    recv_msg_timeout,
    send_message,
    set_socket_buffer_size,
)


class EchoServerError(RuntimeError):
    """Raised when the echo server is used before ``start()``."""


@dataclass
class EchoServer:
    """Single-threaded echo server with periodic liveness scanning."""

    config: TcpSockConfig

    def __post_init__(self) -> None:
        """Prepare the empty client table and shutdown flag."""

        self._stop_event = threading.Event()
        self._listener: SocketHandle | None = None
        self._clients: list[SocketHandle | None] = [EMPTY_SLOT] * self.config.max_clients
        self._buffer = bytearray(self.config.buffer_size)
        self._last_scan = time.monotonic()

    @property
    def port(self) -> int:
        """Return the bound port (resolves ephemeral port 0)."""

        return self._require_listener().local_port

    @property
    def active_clients(self) -> int:
        """Return the number of occupied client slots."""

        return sum(1 for handle in self._clients if handle is not EMPTY_SLOT)

    @property
    def clients(self) -> tuple[SocketHandle | None, ...]:
        """Return a snapshot of the client slot table."""

        return tuple(self._clients)

    @property
    def should_exit(self) -> bool:
        """Return True once shutdown has been requested."""

        return self._stop_event.is_set()

    def start(self, port: int | None = None) -> SocketHandle:
        """Create the listening socket; propagates ``SocketSetupError``."""

        listen_port = self.config.port if port is None else port
        self._listener = create_server_socket(listen_port, self.config.max_clients)
        logger.info(f"Echo server listening on port {self._listener.local_port}")
        return self._listener

    def request_shutdown(self) -> None:
        """Signal ``serve_forever`` to stop after the current poll cycle."""

        self._stop_event.set()

    def serve_forever(self) -> None:
        """Run poll cycles until ``request_shutdown`` is called."""

        self._require_listener()
        while not self._stop_event.is_set():
            self.poll_once()

    def poll_once(self, timeout: float | None = None) -> None:
        """Run one accept/echo cycle, then the liveness scan when it is due."""

        listener = self._require_listener()
        wait = self.config.poll_interval if timeout is None else timeout
        watched: list[SocketHandle] = [listener]
        watched.extend(handle for handle in self._clients if handle is not EMPTY_SLOT)

        readable, _, _ = select.select(watched, [], [], wait)
        for handle in readable:
            if handle is listener:
                self._accept(listener)
            else:
                self._echo(handle)

        now = time.monotonic()
        if now - self._last_scan >= self.config.scan_interval:
            self._last_scan = now
            pruned = check_client_connections(self._clients, self.config.max_clients)
            if pruned:
                logger.debug(f"Liveness scan pruned {pruned} client(s)")

    def close(self) -> None:
        """Close every tracked client and the listener."""

        for index, handle in enumerate(self._clients):
            if handle is not EMPTY_SLOT:
                handle.close()
                self._clients[index] = EMPTY_SLOT
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def _require_listener(self) -> SocketHandle:
        if self._listener is None:
            raise EchoServerError("Echo server is not started; call start() first")
        return self._listener

    def _accept(self, listener: SocketHandle) -> None:
        try:
            handle, addr = listener.accept()
        except OSError as exc:
            logger.error(f"Accept failed: {exc}")
            return

        try:
            slot = self._clients.index(EMPTY_SLOT)
        except ValueError:
            logger.warning(f"Rejecting {addr[0]}:{addr[1]}; all {self.config.max_clients} slots in use")
            handle.close()
            return

        if self.config.rx_buffer_size is not None or self.config.tx_buffer_size is not None:
            try:
                set_socket_buffer_size(
                    handle, self.config.rx_buffer_size, self.config.tx_buffer_size
                )
            except SocketSetupError:
                handle.close()
                return

        self._clients[slot] = handle
        logger.info(f"Accepted {addr[0]}:{addr[1]} into slot {slot}")

    def _echo(self, handle: SocketHandle) -> None:
        result = recv_msg_timeout(handle, self._buffer, timeout_ms=self.config.recv_timeout_ms)
        if result is TransferStatus.TIMEOUT:
            return
        if result is TransferStatus.DISCONNECTED or result is TransferStatus.FAILED:
            self._drop(handle)
            return

        sent = send_message(handle, self._buffer, result)
        if sent is TransferStatus.FAILED:
            self._drop(handle)

    def _drop(self, handle: SocketHandle) -> None:
        slot = self._clients.index(handle)
        handle_client_disconnection(handle)
        self._clients[slot] = EMPTY_SLOT
