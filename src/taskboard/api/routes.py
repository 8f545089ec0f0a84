"""Declarative route table and request dispatch.

Paths have the shape ``/projects[/{pid}[/tasks[/{tid}]]]``.  Id segments
match only base-10 digits, so ``/projects/abc`` falls through to 404 rather
than reaching a handler.  The browser client prefixes every path with
``/api``; that prefix and a single trailing slash are stripped first.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, NamedTuple

from taskboard.api import handlers
from taskboard.api.handlers import Response
from taskboard.core.errors import MethodNotAllowedError, RouteNotFoundError
from taskboard.storage.store import Store

Handler = Callable[[Store, dict[str, int], Any], Response]

API_PREFIX = "/api"


class Route(NamedTuple):
    pattern: re.Pattern[str]
    methods: dict[str, Handler]


def _route(template: str, methods: dict[str, Handler]) -> Route:
    regex = re.sub(r"\{(\w+)\}", r"(?P<\1>[0-9]+)", template)
    return Route(re.compile(f"^{regex}$"), methods)


ROUTES: tuple[Route, ...] = (
    _route(
        "/projects",
        {"GET": handlers.list_projects, "POST": handlers.create_project},
    ),
    _route(
        "/projects/{pid}",
        {
            "GET": handlers.get_project,
            "PUT": handlers.rename_project,
            "DELETE": handlers.delete_project,
        },
    ),
    _route(
        "/projects/{pid}/tasks",
        {"GET": handlers.list_tasks, "POST": handlers.create_task},
    ),
    _route(
        "/projects/{pid}/tasks/{tid}",
        {
            "GET": handlers.get_task,
            "PUT": handlers.update_task,
            "DELETE": handlers.delete_task,
        },
    ),
)


def normalize_path(path: str) -> str:
    """Strip the query string, the ``/api`` prefix, and one trailing slash."""
    path = path.split("?", 1)[0].split("#", 1)[0]
    if path == API_PREFIX or path.startswith(API_PREFIX + "/"):
        path = path[len(API_PREFIX) :]
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path or "/"


def match(method: str, path: str) -> tuple[Handler, dict[str, int]]:
    """Resolve *method* and *path* to a handler and its integer parameters.

    Raises:
        RouteNotFoundError: If no route pattern matches the path.
        MethodNotAllowedError: If a route matches but not for *method*.
    """
    normalized = normalize_path(path)
    for route in ROUTES:
        m = route.pattern.match(normalized)
        if m is None:
            continue
        handler = route.methods.get(method.upper())
        if handler is None:
            raise MethodNotAllowedError(
                f"Method {method.upper()} not allowed for {normalized}",
                allowed=list(route.methods),
            )
        return handler, {key: int(value) for key, value in m.groupdict().items()}
    raise RouteNotFoundError(f"Not found: {normalized}")


def dispatch(store: Store, method: str, path: str, body: Any = None) -> Response:
    """Run the operation for *method* *path* against *store*.

    Returns:
        ``(status, payload)``; *payload* is ``None`` for 204 responses.
    """
    handler, params = match(method, path)
    return handler(store, params, body)
