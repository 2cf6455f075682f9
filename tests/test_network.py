"""Tests for the port availability probe."""

from __future__ import annotations

import pytest

from tcpsock import create_server_socket, is_port_available


def test_free_port_is_available_and_then_bindable(free_port: int) -> None:
    assert is_port_available(free_port) is True

    # The probe must have released the port again.
    handle = create_server_socket(free_port, 1)
    try:
        assert handle.local_port == free_port
    finally:
        handle.close()


def test_listening_port_is_unavailable(free_port: int) -> None:
    handle = create_server_socket(free_port, 1)
    try:
        assert is_port_available(free_port) is False
    finally:
        handle.close()


@pytest.mark.parametrize("port", [-1, 65536, 70000])
def test_out_of_range_port_is_unavailable(port: int) -> None:
    assert is_port_available(port) is False


def test_non_integer_port_is_unavailable() -> None:
    assert is_port_available("http") is False  # type: ignore[arg-type]
