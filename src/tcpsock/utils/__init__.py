"""Utility helpers for tcpsock."""

from __future__ import annotations

__all__ = ["is_port_available"]

from .network import is_port_available  # noqa: E402,F401
