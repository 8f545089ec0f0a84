"""Tests for atomic writes and JSON helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from taskboard.storage.fs import atomic_write, dump_json, read_json


class TestAtomicWrite:
    """atomic_write() writes content safely via temp + fsync + rename."""

    def test_writes_text(self, tmp_path: Path) -> None:
        target = tmp_path / "data.json"
        atomic_write(target, '{"key": "value"}\n')
        assert target.read_text() == '{"key": "value"}\n'

    def test_writes_bytes(self, tmp_path: Path) -> None:
        target = tmp_path / "data.bin"
        atomic_write(target, b"\x00\x01\x02")
        assert target.read_bytes() == b"\x00\x01\x02"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "data.json"
        target.write_text("old\n")
        atomic_write(target, "new\n")
        assert target.read_text() == "new\n"

    def test_no_temp_file_left_after_success(self, tmp_path: Path) -> None:
        target = tmp_path / "data.json"
        atomic_write(target, "content\n")
        assert list(tmp_path.iterdir()) == [target]

    def test_parent_directory_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Parent directory does not exist"):
            atomic_write(tmp_path / "missing" / "data.json", "x")

    def test_failed_rename_keeps_original_and_cleans_up(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "data.json"
        target.write_text("original\n")

        def boom(src, dst):
            raise OSError("disk on fire")

        monkeypatch.setattr(os, "replace", boom)
        with pytest.raises(OSError, match="disk on fire"):
            atomic_write(target, "replacement\n")

        assert target.read_text() == "original\n"
        assert list(tmp_path.iterdir()) == [target]


class TestJsonHelpers:
    def test_dump_json_is_two_space_indented(self) -> None:
        text = dump_json({"a": [1]})
        assert text == '{\n  "a": [\n    1\n  ]\n}\n'

    def test_dump_json_keeps_key_order(self) -> None:
        text = dump_json({"nextProjectId": 2, "nextTaskId": 2, "projects": []})
        assert text.index("nextProjectId") < text.index("nextTaskId") < text.index("projects")

    def test_dump_json_keeps_unicode(self) -> None:
        assert "Café" in dump_json({"name": "Café"})

    def test_read_json_round_trip(self, tmp_path: Path) -> None:
        target = tmp_path / "x.json"
        atomic_write(target, dump_json({"name": "Café"}))
        assert read_json(target) == {"name": "Café"}

    def test_read_json_raises_on_garbage(self, tmp_path: Path) -> None:
        target = tmp_path / "x.json"
        target.write_text("{nope")
        with pytest.raises(json.JSONDecodeError):
            read_json(target)
