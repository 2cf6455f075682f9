"""Tests for tcpsock.yaml loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from tcpsock import config as config_module
from tcpsock.config import ConfigError, TcpSockConfig, load_config
from tcpsock.const import DEFAULT_PORT


def test_missing_default_file_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Fall back to built-in defaults when no config file exists.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory used as a non-existent default location.
    monkeypatch : pytest.MonkeyPatch
        Pytest helper to redirect the default config path.

    Returns
    -------
    None
        Asserts the returned configuration equals the dataclass defaults.

    """

    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")

    settings = load_config(None)

    assert settings == TcpSockConfig()
    assert settings.port == DEFAULT_PORT
    assert settings.max_clients == 5


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_values_from_yaml(tmp_path: Path) -> None:
    """Load every supported key from a YAML mapping.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory for writing the tcpsock.yaml fixture.

    Returns
    -------
    None
        Asserts each key is carried into ``TcpSockConfig``.

    """

    config_path = tmp_path / "tcpsock.yaml"
    config_path.write_text(
        "host: 10.0.0.5\n"
        "port: 19000\n"
        "max_clients: 8\n"
        "buffer_size: 4096\n"
        "recv_timeout_ms: 250\n"
        "poll_interval: 0.05\n"
        "scan_interval: 2\n"
        "rx_buffer_size: 65536\n"
        "tx_buffer_size: 32768\n"
        "log_level: debug\n"
    )

    settings = load_config(config_path)

    assert settings.host == "10.0.0.5"
    assert settings.port == 19000
    assert settings.max_clients == 8
    assert settings.buffer_size == 4096
    assert settings.recv_timeout_ms == 250
    assert settings.poll_interval == 0.05
    assert settings.scan_interval == 2
    assert settings.rx_buffer_size == 65536
    assert settings.tx_buffer_size == 32768
    assert settings.log_level == "DEBUG"


def test_relative_path_resolves_against_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "local.yaml").write_text("port: 20000\n")
    monkeypatch.chdir(tmp_path)

    assert load_config("local.yaml").port == 20000


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "tcpsock.yaml"
    config_path.write_text("")

    assert load_config(config_path) == TcpSockConfig()


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("- port: 1\n", "must contain a mapping"),
        ("bogus: 1\n", "Unknown option"),
        ("port: 70000\n", "between 0 and 65535"),
        ("port: -1\n", "'port' must be >= 0"),
        ("port: abc\n", "'port' must be an integer"),
        ("max_clients: true\n", "'max_clients' must be an integer"),
        ("buffer_size: 0\n", "'buffer_size' must be >= 1"),
        ("recv_timeout_ms: -10\n", "'recv_timeout_ms' must be >= 0"),
        ("scan_interval: 0\n", "'scan_interval' must be > 0"),
        ("poll_interval: fast\n", "'poll_interval' must be a number"),
        ("rx_buffer_size: 0\n", "'rx_buffer_size' must be >= 1"),
        ("host: ''\n", "'host' must be a non-empty string"),
        ("log_level: LOUD\n", "'log_level' must be one of"),
        ("port: [1\n", "Failed to parse"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str, message: str) -> None:
    config_path = tmp_path / "tcpsock.yaml"
    config_path.write_text(content)

    with pytest.raises(ConfigError, match=message):
        load_config(config_path)
