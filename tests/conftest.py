"""Shared pytest fixtures for socket tests on the loopback interface."""

from __future__ import annotations

from collections.abc import Iterator
import socket
import sys
import threading
import time

from loguru import logger
import pytest

from tcpsock import SocketHandle, create_client_socket, create_server_socket
from tcpsock.core import recv_msg_blocking, send_message

TEST_IP = "127.0.0.1"
MAX_CLIENTS = 5


def pick_free_port() -> int:
    """Return a loopback port that nothing is bound to right now."""

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind((TEST_IP, 0))
        return int(probe.getsockname()[1])


def echo_with_delay(handle: SocketHandle, delay_ms: int) -> None:
    """Receive one message on ``handle`` and echo it back after ``delay_ms``."""

    buffer = bytearray(128)
    received = recv_msg_blocking(handle, buffer)
    if isinstance(received, int) and received > 0:
        time.sleep(delay_ms / 1000.0)
        send_message(handle, buffer, received)


def start_thread(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


@pytest.fixture(autouse=True)
def reset_loguru() -> Iterator[None]:
    """Restore the default loguru sink after each test."""

    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru message texts emitted during a test.

    Returns
    -------
    list[str]
        Messages in emission order; the sink is removed on teardown.

    """

    messages: list[str] = []
    sink_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="TRACE")
    yield messages
    logger.remove(sink_id)


@pytest.fixture
def free_port() -> int:
    return pick_free_port()


@pytest.fixture
def server() -> Iterator[SocketHandle]:
    """Listening handle on an ephemeral port, closed on teardown."""

    handle = create_server_socket(0, MAX_CLIENTS)
    yield handle
    handle.close()


@pytest.fixture
def connected_pair(server: SocketHandle) -> Iterator[tuple[SocketHandle, SocketHandle]]:
    """Return ``(client, accepted)`` handles connected over loopback."""

    client = create_client_socket(TEST_IP, server.local_port)
    assert client is not None
    accepted, _ = server.accept()
    yield client, accepted
    for handle in (client, accepted):
        if not handle.closed:
            handle.close()
