"""Project and task operations.

Each handler takes the store, the integer path parameters captured by the
route, and the parsed JSON body (``None`` for bodiless methods).  It returns a
``(status, payload)`` pair; a ``None`` payload means an empty response body.
Failures are raised as :class:`~taskboard.core.errors.ApiError` subclasses.
"""

from __future__ import annotations

from typing import Any

from taskboard.core.errors import NotFoundError, ValidationError
from taskboard.core.models import (
    DEFAULT_STATUS,
    VALID_STATUSES,
    Project,
    Root,
    Task,
    find_project,
    find_task,
    new_project,
    new_task,
    remove_project,
    remove_task,
    touch,
)
from taskboard.storage.store import Store

Response = tuple[int, Any]

_UPDATABLE_TASK_FIELDS = ("title", "description", "status")


# ---------------------------------------------------------------------------
# Body validation
# ---------------------------------------------------------------------------


def _require_object(body: Any) -> dict:
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _require_text(body: dict, field: str) -> str:
    value = body.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' is required and must be a non-empty string")
    return value


def _check_description(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("'description' must be a string")
    return value


def _check_status(value: Any) -> str:
    if value not in VALID_STATUSES:
        valid = ", ".join(VALID_STATUSES)
        raise ValidationError(f"Invalid status: {value!r}. Valid: {valid}")
    return value


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def _get_project(root: Root, pid: int) -> Project:
    project = find_project(root, pid)
    if project is None:
        raise NotFoundError(f"Project {pid} not found")
    return project


def _get_task(root: Root, pid: int, tid: int) -> tuple[Project, Task]:
    project = _get_project(root, pid)
    task = find_task(project, tid)
    if task is None:
        raise NotFoundError(f"Task {tid} not found in project {pid}")
    return project, task


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def list_projects(store: Store, params: dict[str, int], body: Any) -> Response:
    return 200, store.read()["projects"]


def create_project(store: Store, params: dict[str, int], body: Any) -> Response:
    name = _require_text(_require_object(body), "name")
    with store.transaction() as root:
        project = new_project(root, name)
    return 201, project


def get_project(store: Store, params: dict[str, int], body: Any) -> Response:
    return 200, _get_project(store.read(), params["pid"])


def rename_project(store: Store, params: dict[str, int], body: Any) -> Response:
    name = _require_text(_require_object(body), "name")
    with store.transaction() as root:
        project = _get_project(root, params["pid"])
        project["name"] = name
    return 200, project


def delete_project(store: Store, params: dict[str, int], body: Any) -> Response:
    pid = params["pid"]
    with store.transaction() as root:
        if not remove_project(root, pid):
            raise NotFoundError(f"Project {pid} not found")
    return 204, None


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def list_tasks(store: Store, params: dict[str, int], body: Any) -> Response:
    return 200, _get_project(store.read(), params["pid"])["tasks"]


def create_task(store: Store, params: dict[str, int], body: Any) -> Response:
    """Handle POST /projects/{pid}/tasks.

    ``title`` is required; ``description`` defaults to ``""`` and ``status``
    to ``"todo"``.
    """
    fields = _require_object(body)
    title = _require_text(fields, "title")
    description = _check_description(fields.get("description", ""))
    status = _check_status(fields.get("status", DEFAULT_STATUS))

    with store.transaction() as root:
        project = _get_project(root, params["pid"])
        task = new_task(root, project, title, description, status)
    return 201, task


def get_task(store: Store, params: dict[str, int], body: Any) -> Response:
    _project, task = _get_task(store.read(), params["pid"], params["tid"])
    return 200, task


def update_task(store: Store, params: dict[str, int], body: Any) -> Response:
    """Handle PUT /projects/{pid}/tasks/{tid} as a partial update.

    Only fields present in the body are overwritten.  ``updatedAt`` is
    refreshed on every call, including one with an empty body.
    """
    fields = _require_object(body)
    changes: dict[str, str] = {}
    if "title" in fields:
        changes["title"] = _require_text(fields, "title")
    if "description" in fields:
        changes["description"] = _check_description(fields["description"])
    if "status" in fields:
        changes["status"] = _check_status(fields["status"])

    with store.transaction() as root:
        _project, task = _get_task(root, params["pid"], params["tid"])
        for field in _UPDATABLE_TASK_FIELDS:
            if field in changes:
                task[field] = changes[field]
        touch(task)
    return 200, task


def delete_task(store: Store, params: dict[str, int], body: Any) -> Response:
    pid, tid = params["pid"], params["tid"]
    with store.transaction() as root:
        project = _get_project(root, pid)
        if not remove_task(project, tid):
            raise NotFoundError(f"Task {tid} not found in project {pid}")
    return 204, None
