"""Tests for the init, list, and serve commands."""

from __future__ import annotations

import json
import socket
from pathlib import Path

from taskboard.core.models import new_project, new_task, seed_root
from taskboard.storage.store import Store


class TestInit:
    def test_writes_seed(self, invoke, data_path: Path) -> None:
        result = invoke("init")
        assert result.exit_code == 0, result.output
        assert f"Initialized {data_path}" in result.output

        root = json.loads(data_path.read_text())
        assert root["nextProjectId"] == 2
        assert root["projects"][0]["tasks"][0]["id"] == 1

    def test_refuses_to_overwrite(self, invoke, data_path: Path) -> None:
        data_path.write_text('{"keep": true}')
        result = invoke("init")
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert data_path.read_text() == '{"keep": true}'

    def test_force_overwrites(self, invoke, data_path: Path) -> None:
        data_path.write_text("{}")
        result = invoke("init", "--force")
        assert result.exit_code == 0
        assert json.loads(data_path.read_text())["nextTaskId"] == 2

    def test_data_flag_beats_env(self, invoke, tmp_path: Path, data_path: Path) -> None:
        other = tmp_path / "other.json"
        result = invoke("init", "--data", str(other))
        assert result.exit_code == 0
        assert other.is_file()
        assert not data_path.exists()


class TestList:
    def test_human_output(self, invoke, data_path: Path) -> None:
        root = seed_root()
        project = new_project(root, "Acme")
        new_task(root, project, "a", status="done")
        new_task(root, project, "b", status="done")
        new_task(root, project, "c")
        new_project(root, "Empty")
        Store(data_path).save(root)

        result = invoke("list")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "#1  Sample Project  (todo: 1)"
        assert lines[1] == "#2  Acme  (done: 2, todo: 1)"
        assert lines[2] == "#3  Empty  (no tasks)"

    def test_json_output(self, invoke, data_path: Path) -> None:
        result = invoke("list", "--json")
        assert result.exit_code == 0
        projects = json.loads(result.output)
        assert [p["id"] for p in projects] == [1]

        again = json.loads(invoke("list", "--json").output)
        assert again == projects

    def test_no_projects(self, invoke, data_path: Path) -> None:
        Store(data_path).save({"nextProjectId": 2, "nextTaskId": 2, "projects": []})
        result = invoke("list")
        assert result.output.strip() == "No projects."


class TestServe:
    def test_invalid_port_env(self, cli_runner, data_path: Path) -> None:
        from taskboard.cli.main import cli

        result = cli_runner.invoke(
            cli, ["serve"], env={"PORT": "nope", "TASKBOARD_DATA": str(data_path)}
        )
        assert result.exit_code == 1
        assert "PORT must be an integer" in result.output

    def test_port_in_use(self, invoke) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            s.listen(1)
            busy = s.getsockname()[1]
            result = invoke("serve", "--host", "127.0.0.1", "--port", str(busy))

        assert result.exit_code == 1
        assert f"Port {busy} is already in use" in result.output

    def test_serves_until_interrupted(self, invoke, monkeypatch) -> None:
        from http.server import HTTPServer

        def interrupt(self, poll_interval=0.5):
            raise KeyboardInterrupt

        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            port = s.getsockname()[1]

        monkeypatch.setattr(HTTPServer, "serve_forever", interrupt)
        result = invoke("serve", "--host", "127.0.0.1", "--port", str(port))
        assert result.exit_code == 0, result.output
        assert f"Taskboard API: http://127.0.0.1:{port}/projects" in result.output
