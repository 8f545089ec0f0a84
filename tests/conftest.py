"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from taskboard.storage.store import Store


@pytest.fixture()
def data_path(tmp_path: Path) -> Path:
    """Return a not-yet-existing data file path inside a temp directory."""
    return tmp_path / "data.json"


@pytest.fixture()
def store(data_path: Path) -> Store:
    """Return a Store over an empty location (loads as seed data)."""
    return Store(data_path, lock_timeout=2)


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Return a Click CliRunner for invoking CLI commands."""
    return CliRunner()


@pytest.fixture()
def invoke(cli_runner: CliRunner, data_path: Path):
    """Return a helper that invokes CLI commands against the temp data file.

    Usage::

        result = invoke("list", "--json")
    """
    from taskboard.cli.main import cli

    def _invoke(*args: str, **kwargs):
        env = {"TASKBOARD_DATA": str(data_path)}
        return cli_runner.invoke(cli, list(args), env=env, **kwargs)

    return _invoke
