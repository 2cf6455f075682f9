"""Constants shared across tcpsock.

Defaults for the server and client factories, the fixed keep-alive policy
applied to every listening socket, and the CLI configuration location live
here so tests and alternate deployments can reference a single source.
"""

from __future__ import annotations

from pathlib import Path

__version__ = "0.1.0"

# Bind to every local IPv4 interface
DEFAULT_BIND_HOST = ""
DEFAULT_CONNECT_HOST = "127.0.0.1"
DEFAULT_PORT = 12347
DEFAULT_MAX_CLIENTS = 5

# Size of the scratch buffer used by the echo server and CLI
BUFFER_SIZE = 1024

DEFAULT_RECV_TIMEOUT_MS = 1000
DEFAULT_POLL_INTERVAL_SECONDS = 0.2
DEFAULT_SCAN_INTERVAL_SECONDS = 1.0
DEFAULT_LOG_LEVEL = "INFO"

# Keep-alive policy applied to every server socket
KEEPALIVE_ENABLED = True
KEEPALIVE_IDLE_SECONDS = 10
KEEPALIVE_INTERVAL_SECONDS = 5
KEEPALIVE_PROBE_COUNT = 3

# Marks an unused slot in a tracked client collection
EMPTY_SLOT = None

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "tcpsock" / "tcpsock.yaml"
