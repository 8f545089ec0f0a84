"""CLI entry point and commands."""

from __future__ import annotations

import click

from taskboard.cli.helpers import data_option, json_dumps, open_store, output_error
from taskboard.core.models import seed_root


@click.group()
@click.version_option(package_name="taskboard")
def cli() -> None:
    """Taskboard: project and task tracker backed by a JSON file."""


@cli.command()
@data_option
@click.option("--force", is_flag=True, help="Overwrite an existing data file.")
def init(data_path: str | None, force: bool) -> None:
    """Write the seed project and task to the data file."""
    store = open_store(data_path)
    if store.path.exists() and not force:
        output_error(f"{store.path} already exists (use --force to overwrite)")
    store.save(seed_root())
    click.echo(f"Initialized {store.path}")


@cli.command("list")
@data_option
@click.option("--json", "output_json", is_flag=True, help="Output the projects as JSON.")
def list_cmd(data_path: str | None, output_json: bool) -> None:
    """List projects with their task counts by status."""
    store = open_store(data_path)
    projects = store.read()["projects"]

    if output_json:
        click.echo(json_dumps(projects))
        return

    if not projects:
        click.echo("No projects.")
        return
    for project in projects:
        counts: dict[str, int] = {}
        for task in project["tasks"]:
            status = task.get("status", "todo")
            counts[status] = counts.get(status, 0) + 1
        summary = ", ".join(f"{status}: {n}" for status, n in sorted(counts.items()))
        click.echo(f"#{project['id']}  {project['name']}  ({summary or 'no tasks'})")


def main() -> None:
    cli()


# ---------------------------------------------------------------------------
# Register command modules (must be after cli group is defined)
# ---------------------------------------------------------------------------
from taskboard.cli import serve_cmd as _serve_cmd  # noqa: E402, F401

if __name__ == "__main__":
    main()
