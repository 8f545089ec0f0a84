"""HTTP server exposing the project/task API."""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any

from taskboard.api.routes import match
from taskboard.core.errors import (
    ApiError,
    MalformedBodyError,
    MethodNotAllowedError,
    PayloadTooLargeError,
)
from taskboard.storage.store import Store

logger = logging.getLogger(__name__)

# Maximum accepted request body size (1 MiB).
MAX_REQUEST_BODY_BYTES = 1_048_576

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _encode(payload: Any) -> bytes:
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8") + b"\n"


# ---------------------------------------------------------------------------
# Request handler
# ---------------------------------------------------------------------------


def _make_handler_class(store: Store) -> type:
    """Create a handler class bound to a specific store."""

    class TaskboardHandler(BaseHTTPRequestHandler):
        _store: Store = store
        protocol_version = "HTTP/1.1"

        # Route access logs through logging instead of raw stderr writes
        def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
            logger.info("%s - %s", self.address_string(), format % args)

        def do_OPTIONS(self) -> None:  # noqa: N802
            self._send(204, None)

        def do_GET(self) -> None:  # noqa: N802
            self._handle(has_body=False)

        def do_DELETE(self) -> None:  # noqa: N802
            self._handle(has_body=False)

        def do_POST(self) -> None:  # noqa: N802
            self._handle(has_body=True)

        def do_PUT(self) -> None:  # noqa: N802
            self._handle(has_body=True)

        def do_HEAD(self) -> None:  # noqa: N802
            self._handle(has_body=False)

        def __getattr__(self, name: str) -> Any:
            # Unlisted verbs still go through the router: 405 on known paths
            if name.startswith("do_"):
                return lambda: self._handle(has_body=False)
            raise AttributeError(name)

        # ---------------------------------------------------------------
        # Dispatch
        # ---------------------------------------------------------------

        def _handle(self, *, has_body: bool) -> None:
            try:
                handler, params = match(self.command, self.path)
                body = self._read_json_body() if has_body else None
                status, payload = handler(self._store, params, body)
            except MethodNotAllowedError as exc:
                self._send(exc.status, exc.to_payload(), {"Allow": ", ".join(exc.allowed)})
                return
            except ApiError as exc:
                if exc.status >= 500:
                    logger.warning("%s %s failed: %s", self.command, self.path, exc.message)
                self._send(exc.status, exc.to_payload())
                return
            except Exception:
                logger.exception("Unhandled error for %s %s", self.command, self.path)
                self._send(500, {"error": "Internal server error"})
                return
            self._send(status, payload)

        def _read_json_body(self) -> Any:
            """Read and parse the request body; an empty body parses as ``{}``."""
            raw_length = self.headers.get("Content-Length")
            try:
                length = int(raw_length) if raw_length else 0
            except ValueError:
                raise MalformedBodyError("Invalid Content-Length header") from None
            if length < 0:
                raise MalformedBodyError("Invalid Content-Length header")
            if length > MAX_REQUEST_BODY_BYTES:
                raise PayloadTooLargeError(
                    f"Request body exceeds {MAX_REQUEST_BODY_BYTES} bytes"
                )
            if length == 0:
                return {}

            raw = self.rfile.read(length)
            try:
                return json.loads(raw)
            except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
                raise MalformedBodyError("Invalid JSON in request body") from None

        # ---------------------------------------------------------------
        # Response helper
        # ---------------------------------------------------------------

        def _send(
            self, status: int, payload: Any, extra_headers: dict[str, str] | None = None
        ) -> None:
            data = b"" if status == 204 or payload is None else _encode(payload)
            # One request per connection; the server handles requests serially
            self.close_connection = True
            self.send_response(status)
            self.send_header("Connection", "close")
            for name, value in CORS_HEADERS.items():
                self.send_header(name, value)
            for name, value in (extra_headers or {}).items():
                self.send_header(name, value)
            if data:
                self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            if data and self.command != "HEAD":
                self.wfile.write(data)

    return TaskboardHandler


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_server(store: Store, host: str, port: int) -> HTTPServer:
    """Create an HTTP server bound to *host*:*port* serving the API for *store*.

    Requests are handled one at a time; the store lock additionally guards
    against other processes writing the same data file.
    """
    handler_cls = _make_handler_class(store)
    return HTTPServer((host, port), handler_cls)
