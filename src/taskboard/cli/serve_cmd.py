"""``taskboard serve`` command."""

from __future__ import annotations

import errno
import logging

import click

from taskboard.cli.helpers import data_option, open_store, output_error
from taskboard.cli.main import cli
from taskboard.core.config import resolve_host, resolve_port
from taskboard.core.errors import ConfigError

logger = logging.getLogger(__name__)


@cli.command("serve")
@click.option("--host", default=None, help="Host to bind to. Defaults to $TASKBOARD_HOST, or 127.0.0.1.")
@click.option("--port", default=None, type=int, help="Port to bind to. Defaults to $PORT, or 3000.")
@data_option
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def serve_cmd(host: str | None, port: int | None, data_path: str | None, verbose: bool) -> None:
    """Serve the project/task JSON API over HTTP."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        host = resolve_host(host)
        port = resolve_port(port)
    except ConfigError as exc:
        output_error(str(exc))

    store = open_store(data_path)

    from taskboard.api.server import create_server

    try:
        server = create_server(store, host, port)
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            output_error(f"Port {port} is already in use. Start on another port with --port <PORT>.")
        output_error(str(exc))

    click.echo(f"Taskboard API: http://{host}:{port}/projects")
    click.echo(f"Data file: {store.path}")
    click.echo("Press Ctrl+C to stop.")
    logger.debug("Serving %r", store)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
