"""Project/task data graph: construction, lookup, and structural checks.

The whole graph lives in one plain dict (the *root*) so that it can be
serialized to JSON without any mapping layer::

    {
      "nextProjectId": 2,
      "nextTaskId": 2,
      "projects": [
        {"id": 1, "name": "...", "tasks": [
          {"id": 1, "title": "...", "description": "", "status": "todo",
           "createdAt": "...", "updatedAt": "..."}
        ]}
      ]
    }

Tasks belong to the project whose ``tasks`` list contains them; there is no
back-reference.  Task ids come from one counter shared by every project.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TypedDict

VALID_STATUSES: tuple[str, ...] = ("todo", "in-progress", "done")
DEFAULT_STATUS = "todo"

_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class Task(TypedDict):
    id: int
    title: str
    description: str
    status: str
    createdAt: str
    updatedAt: str


class Project(TypedDict):
    id: int
    name: str
    tasks: list[Task]


class Root(TypedDict):
    nextProjectId: int
    nextTaskId: int
    projects: list[Project]


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def utc_now() -> str:
    """Return the current UTC time as an RFC 3339 string with ``Z`` suffix.

    Microsecond precision keeps lexical order equal to chronological order.
    """
    return _format_ts(datetime.now(timezone.utc))


def _format_ts(dt: datetime) -> str:
    return dt.strftime(_TS_FORMAT)


def _parse_ts(ts: str) -> datetime | None:
    try:
        return datetime.strptime(ts, _TS_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def next_timestamp(previous: str | None = None) -> str:
    """Return a timestamp strictly later than *previous*.

    Two updates inside the same clock tick would otherwise produce equal
    ``updatedAt`` values.
    """
    now = datetime.now(timezone.utc)
    prev = _parse_ts(previous) if previous else None
    if prev is not None and now <= prev:
        now = prev + timedelta(microseconds=1)
    return _format_ts(now)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def seed_root() -> Root:
    """Return the default root used when no persisted state exists."""
    ts = utc_now()
    return {
        "nextProjectId": 2,
        "nextTaskId": 2,
        "projects": [
            {
                "id": 1,
                "name": "Sample Project",
                "tasks": [
                    {
                        "id": 1,
                        "title": "Sample Task",
                        "description": "This is a sample task",
                        "status": DEFAULT_STATUS,
                        "createdAt": ts,
                        "updatedAt": ts,
                    }
                ],
            }
        ],
    }


def new_project(root: Root, name: str) -> Project:
    """Allocate a project id, append a new empty project to *root*, return it."""
    project: Project = {"id": root["nextProjectId"], "name": name, "tasks": []}
    root["nextProjectId"] += 1
    root["projects"].append(project)
    return project


def new_task(
    root: Root,
    project: Project,
    title: str,
    description: str = "",
    status: str = DEFAULT_STATUS,
) -> Task:
    """Allocate a task id from the root-wide counter and append to *project*."""
    ts = utc_now()
    task: Task = {
        "id": root["nextTaskId"],
        "title": title,
        "description": description,
        "status": status,
        "createdAt": ts,
        "updatedAt": ts,
    }
    root["nextTaskId"] += 1
    project["tasks"].append(task)
    return task


def touch(task: Task) -> None:
    """Refresh ``updatedAt`` so it is strictly later than before."""
    task["updatedAt"] = next_timestamp(task.get("updatedAt"))


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_project(root: Root, project_id: int) -> Project | None:
    for project in root["projects"]:
        if project["id"] == project_id:
            return project
    return None


def find_task(project: Project, task_id: int) -> Task | None:
    for task in project["tasks"]:
        if task["id"] == task_id:
            return task
    return None


def remove_project(root: Root, project_id: int) -> bool:
    """Remove a project (and with it, all its tasks). Return ``False`` if absent."""
    before = len(root["projects"])
    root["projects"] = [p for p in root["projects"] if p["id"] != project_id]
    return len(root["projects"]) != before


def remove_task(project: Project, task_id: int) -> bool:
    before = len(project["tasks"])
    project["tasks"] = [t for t in project["tasks"] if t["id"] != task_id]
    return len(project["tasks"]) != before


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------


def _is_int(value: object) -> bool:
    # bool is an int subclass; reject it explicitly.
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_root(data: object) -> bool:
    """Return ``True`` if *data* has the shape of a persisted root.

    Only the structure the API relies on is checked: integer counters, a list
    of projects with integer ids and task lists of dicts with integer ids.
    """
    if not isinstance(data, dict):
        return False
    if not _is_int(data.get("nextProjectId")) or not _is_int(data.get("nextTaskId")):
        return False
    projects = data.get("projects")
    if not isinstance(projects, list):
        return False
    for project in projects:
        if not isinstance(project, dict) or not _is_int(project.get("id")):
            return False
        tasks = project.get("tasks")
        if not isinstance(tasks, list):
            return False
        for task in tasks:
            if not isinstance(task, dict) or not _is_int(task.get("id")):
                return False
    return True
