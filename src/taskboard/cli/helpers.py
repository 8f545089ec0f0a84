"""Shared CLI helpers and output utilities."""

from __future__ import annotations

import json
from typing import NoReturn

import click

from taskboard.core.config import resolve_data_path
from taskboard.storage.store import Store

data_option = click.option(
    "--data",
    "data_path",
    default=None,
    help="Path to the JSON data file. Defaults to $TASKBOARD_DATA, or ./data.json.",
)


def open_store(data_path: str | None) -> Store:
    """Build a Store for the --data flag, falling back to the environment."""
    return Store(resolve_data_path(data_path))


def json_dumps(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def output_error(message: str, exit_code: int = 1) -> NoReturn:
    """Print error to stderr and exit."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(exit_code)
