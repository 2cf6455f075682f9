"""Configuration loading for the tcpsock CLI and echo server.

The configuration lives in a small YAML mapping (``tcpsock.yaml``). Every
key is optional; missing keys fall back to the defaults in ``const``.
Unknown keys and out-of-range values raise ``ConfigError`` with a message
suitable for showing to the user.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from loguru import logger
import yaml

from tcpsock.const import (
    BUFFER_SIZE,
    DEFAULT_CONFIG_PATH,
    DEFAULT_CONNECT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CLIENTS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_PORT,
    DEFAULT_RECV_TIMEOUT_MS,
    DEFAULT_SCAN_INTERVAL_SECONDS,
)

LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or invalid."""


@dataclass(slots=True)
class TcpSockConfig:
    """Settings shared by the CLI commands and ``EchoServer``.

    Attributes:
        host: address ``send`` connects to
        port: port ``serve`` listens on and ``send`` connects to
        max_clients: listen backlog and number of tracked client slots
        buffer_size: scratch buffer size for echo and replies
        recv_timeout_ms: bounded-receive timeout in milliseconds
        poll_interval: seconds ``EchoServer`` waits per poll cycle
        scan_interval: seconds between liveness scans
        rx_buffer_size: optional SO_RCVBUF for accepted clients
        tx_buffer_size: optional SO_SNDBUF for accepted clients
        log_level: loguru level name for the CLI sink

    """

    host: str = DEFAULT_CONNECT_HOST
    port: int = DEFAULT_PORT
    max_clients: int = DEFAULT_MAX_CLIENTS
    buffer_size: int = BUFFER_SIZE
    recv_timeout_ms: int = DEFAULT_RECV_TIMEOUT_MS
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    scan_interval: float = DEFAULT_SCAN_INTERVAL_SECONDS
    rx_buffer_size: int | None = None
    tx_buffer_size: int | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    def validate(self) -> None:
        """Check value ranges, raising ``ConfigError`` on the first problem."""

        if not isinstance(self.host, str) or not self.host:
            raise ConfigError("'host' must be a non-empty string")
        _require_int("port", self.port, minimum=0)
        if self.port > 65535:
            raise ConfigError(f"'port' must be between 0 and 65535, got {self.port}")
        _require_int("max_clients", self.max_clients, minimum=0)
        _require_int("buffer_size", self.buffer_size, minimum=1)
        _require_int("recv_timeout_ms", self.recv_timeout_ms, minimum=0)
        _require_number("poll_interval", self.poll_interval)
        _require_number("scan_interval", self.scan_interval)
        for key in ("rx_buffer_size", "tx_buffer_size"):
            value = getattr(self, key)
            if value is not None:
                _require_int(key, value, minimum=1)
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"'log_level' must be one of {', '.join(sorted(LOG_LEVELS))}, got {self.log_level!r}"
            )
        self.log_level = self.log_level.upper()


def _require_int(key: str, value: Any, *, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"'{key}' must be >= {minimum}, got {value}")


def _require_number(key: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    if value <= 0:
        raise ConfigError(f"'{key}' must be > 0, got {value}")


def resolve_config_path(config: str | Path | None) -> Path:
    """Resolve the config path, falling back to the default location."""

    if config is None:
        return DEFAULT_CONFIG_PATH
    candidate = Path(config).expanduser()
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    return candidate


def load_config(config: str | Path | None = None) -> TcpSockConfig:
    """Load and validate ``tcpsock.yaml``.

    When ``config`` is None and the default file does not exist, the
    built-in defaults are returned. An explicitly requested file that does
    not exist is an error.
    """

    path = resolve_config_path(config)
    if not path.exists():
        if config is None:
            logger.debug(f"No config at {path}; using defaults")
            return TcpSockConfig()
        raise ConfigError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must contain a mapping of settings")

    known = {field.name for field in fields(TcpSockConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown option(s) in {path.name}: {', '.join(map(str, unknown))}")

    settings = TcpSockConfig(**raw)
    settings.validate()
    return settings
