"""HTTP server fixtures."""

from __future__ import annotations

import socket
import threading

import pytest

from taskboard.api.server import create_server
from taskboard.storage.store import Store


def _get_free_port() -> int:
    """Find an available TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture()
def api_server(store: Store):
    """Start the API server on a random port, yield (base_url, store)."""
    port = _get_free_port()
    host = "127.0.0.1"
    server = create_server(store, host, port)

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://{host}:{port}", store

    server.shutdown()
    server.server_close()
