"""Click-based CLI for tcpsock.

Small operational surface over the library: probe a port, run the echo
server, or send a single message and print the reply.
"""

from __future__ import annotations

from dataclasses import dataclass
import sys

import click
from loguru import logger

from tcpsock.config import LOG_LEVELS, ConfigError, TcpSockConfig, load_config
from tcpsock.const import __version__
from tcpsock.core import (
    SocketSetupError,
    TransferStatus,
    create_client_socket,
    recv_msg_timeout,
    send_message,
)
from tcpsock.echo import EchoServer
from tcpsock.utils import is_port_available


def configure_cli_logging(level: str) -> None:
    """Configure Loguru for CLI usage (message-only sink on stderr)."""

    logger.remove()
    logger.add(sys.stderr, level=level, format="{message}", colorize=False)


@dataclass(slots=True)
class CLIContext:
    """Runtime context shared across Click commands."""

    config: TcpSockConfig


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "config",
    "--config",
    type=click.Path(exists=False, dir_okay=False, path_type=str),
    default=None,
    help="Path to tcpsock.yaml (default: ~/.config/tcpsock/tcpsock.yaml).",
)
@click.option(
    "log_level",
    "--log-level",
    type=click.Choice(sorted(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Log level override (default: tcpsock.yaml log_level).",
)
@click.version_option(version=__version__, prog_name="tcpsock")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """tcpsock command-line interface."""

    try:
        settings = load_config(config)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    if log_level is not None:
        settings.log_level = log_level.upper()

    configure_cli_logging(settings.log_level)
    ctx.obj = CLIContext(config=settings)


@cli.command("check-port")
@click.argument("port", type=int)
def check_port_command(port: int) -> None:
    """Report whether PORT can be bound on all local interfaces."""

    if is_port_available(port):
        click.echo(f"Port {port} is available")
        return
    click.echo(f"Port {port} is unavailable")
    click.get_current_context().exit(1)


@cli.command("serve")
@click.option("port", "--port", type=int, default=None, help="Listen port (default: config port).")
@click.option(
    "max_clients",
    "--max-clients",
    type=click.IntRange(min=0),
    default=None,
    help="Client slots and listen backlog (default: config max_clients).",
)
@click.pass_obj
def serve_command(ctx: CLIContext, port: int | None, max_clients: int | None) -> None:
    """Run the echo server until interrupted."""

    if max_clients is not None:
        ctx.config.max_clients = max_clients
    server = EchoServer(ctx.config)
    try:
        server.start(port)
    except SocketSetupError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Echo server listening on port {server.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:  # pragma: no cover - interactive control path
        click.echo("Echo server interrupted; shutting down")
    finally:
        server.close()


@cli.command("send")
@click.argument("message")
@click.option("host", "--host", type=str, default=None, help="Server address (default: config host).")
@click.option("port", "--port", type=int, default=None, help="Server port (default: config port).")
@click.option(
    "timeout_ms",
    "--timeout-ms",
    type=click.IntRange(min=0),
    default=None,
    help="Reply timeout in milliseconds (default: config recv_timeout_ms).",
)
@click.pass_obj
def send_command(
    ctx: CLIContext, message: str, host: str | None, port: int | None, timeout_ms: int | None
) -> None:
    """Send MESSAGE once and print the reply."""

    host = host or ctx.config.host
    port = ctx.config.port if port is None else port
    timeout_ms = ctx.config.recv_timeout_ms if timeout_ms is None else timeout_ms

    handle = create_client_socket(host, port)
    if handle is None:
        raise click.ClickException(f"Could not connect to {host}:{port}")

    try:
        payload = message.encode("utf-8")
        sent = send_message(handle, payload)
        if sent is TransferStatus.FAILED:
            raise click.ClickException("Send failed")

        buffer = bytearray(max(ctx.config.buffer_size, len(payload)))
        result = recv_msg_timeout(handle, buffer, timeout_ms=timeout_ms)
    finally:
        handle.close()

    if result is TransferStatus.TIMEOUT:
        click.echo(f"No reply within {timeout_ms} ms")
        click.get_current_context().exit(1)
    if result is TransferStatus.DISCONNECTED:
        click.echo("Server closed the connection")
        click.get_current_context().exit(1)
    if result is TransferStatus.FAILED:
        raise click.ClickException("Receive failed")

    click.echo(buffer[:result].decode("utf-8", errors="replace"))


def main() -> None:
    """Entry point for the console script."""

    cli.main(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    main()
