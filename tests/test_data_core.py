"""Unit tests for the task file, JSON I/O and the store context."""

import json
import os
import pytest
from unittest.mock import patch

from taskcrab.config import Settings
from taskcrab.data import (
    TaskFile, TaskContext, LoadStatus, atomic_write, load_json_file
)
from taskcrab.models import Task, DueDate
from taskcrab.recovery import CorruptionError, FatalError, FileOperationError


class TestAtomicWrite:
    """Test atomic JSON writes."""

    def test_writes_pretty_json(self, tmp_path):
        """Test content is indented JSON."""
        target = tmp_path / "tasks.json"
        assert atomic_write(target, [{"name": "a"}]) is True
        text = target.read_text(encoding="utf-8")
        assert json.loads(text) == [{"name": "a"}]
        assert "\n  " in text

    def test_replaces_existing_content(self, tmp_path):
        """Test the old snapshot is fully replaced."""
        target = tmp_path / "tasks.json"
        target.write_text(json.dumps([{"name": "old"}] * 50))
        atomic_write(target, [])
        assert json.loads(target.read_text()) == []

    def test_no_temp_files_left(self, tmp_path):
        """Test only the target remains after a write."""
        target = tmp_path / "tasks.json"
        atomic_write(target, [1, 2, 3])
        assert os.listdir(tmp_path) == ["tasks.json"]

    def test_serialization_error_is_fatal(self, tmp_path):
        """Test non-serializable data raises FatalError and leaves the file alone."""
        target = tmp_path / "tasks.json"
        target.write_text("[]")
        with pytest.raises(FatalError):
            atomic_write(target, [object()])
        assert target.read_text() == "[]"
        assert os.listdir(tmp_path) == ["tasks.json"]

    def test_missing_directory(self, tmp_path):
        """Test writing into a missing directory is a recoverable error."""
        with pytest.raises(FileOperationError):
            atomic_write(tmp_path / "nope" / "tasks.json", [])

    def test_create_dirs(self, tmp_path):
        """Test parent directories can be created on request."""
        target = tmp_path / "a" / "b" / "tasks.json"
        atomic_write(target, [], create_dirs=True)
        assert target.exists()

    def test_replace_failure_cleans_up(self, tmp_path):
        """Test a failed rename removes the temporary file."""
        target = tmp_path / "tasks.json"
        with patch("taskcrab.data.io.os.replace", side_effect=PermissionError("denied")):
            with pytest.raises(FileOperationError, match="denied"):
                atomic_write(target, [])
        assert os.listdir(tmp_path) == []


class TestLoadJsonFile:
    """Test JSON loading."""

    def test_missing(self, tmp_path):
        """Test a missing file gives None."""
        assert load_json_file(tmp_path / "tasks.json") is None

    def test_empty(self, tmp_path):
        """Test an empty or blank file gives None."""
        target = tmp_path / "tasks.json"
        target.write_text("")
        assert load_json_file(target) is None
        target.write_text("  \n")
        assert load_json_file(target) is None

    def test_malformed(self, tmp_path):
        """Test invalid JSON raises CorruptionError."""
        target = tmp_path / "tasks.json"
        target.write_text("[{")
        with pytest.raises(CorruptionError):
            load_json_file(target)

    def test_unreadable(self, tmp_path):
        """Test read errors raise FileOperationError."""
        target = tmp_path / "tasks.json"
        target.write_text("[]")
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(FileOperationError):
                load_json_file(target)


class TestTaskFile:
    """Test TaskFile load and save outcomes."""

    def test_load_missing(self, tmp_path):
        """Test a missing file means no prior data."""
        result = TaskFile(tmp_path / "tasks.json").load()
        assert result.status == LoadStatus.MISSING
        assert result.tasks == []
        assert result.ok

    def test_load_sorts(self, tmp_path):
        """Test tasks saved without sorting come back in priority order."""
        target = tmp_path / "tasks.json"
        target.write_text(json.dumps([
            {"id": 0, "name": "low", "priority": 1, "due_date": [0, 0, 0]},
            {"id": 1, "name": "high", "priority": 5, "due_date": [4, 1, 2025]},
            {"id": 2, "name": "mid", "priority": 3, "due_date": [0, 0, 0]},
        ]))
        result = TaskFile(target).load()
        assert result.status == LoadStatus.LOADED
        assert [t.name for t in result.tasks] == ["high", "mid", "low"]
        assert result.tasks[0].due_date == DueDate(4, 1, 2025)

    def test_load_reassigns_duplicate_ids(self, tmp_path):
        """Test positional ids from older files are made unique."""
        target = tmp_path / "tasks.json"
        target.write_text(json.dumps([
            {"id": 0, "name": "a", "priority": 3, "due_date": [0, 0, 0]},
            {"id": 0, "name": "b", "priority": 3, "due_date": [0, 0, 0]},
            {"id": 1, "name": "c", "priority": 3, "due_date": [0, 0, 0]},
        ]))
        tasks = TaskFile(target).load().tasks
        ids = [t.id for t in tasks]
        assert len(set(ids)) == 3
        assert [t.name for t in tasks] == ["a", "b", "c"]

    def test_load_corrupt(self, tmp_path):
        """Test malformed content is reported, not raised."""
        target = tmp_path / "tasks.json"
        target.write_text("not json")
        result = TaskFile(target).load()
        assert result.status == LoadStatus.CORRUPT
        assert result.tasks == []
        assert result.error
        assert not result.ok

    def test_load_wrong_shape(self, tmp_path):
        """Test valid JSON that is not a task list is corrupt."""
        target = tmp_path / "tasks.json"
        target.write_text(json.dumps({"tasks": []}))
        assert TaskFile(target).load().status == LoadStatus.CORRUPT

    def test_load_read_error(self, tmp_path):
        """Test read failures are reported as READ_ERROR."""
        target = tmp_path / "tasks.json"
        target.write_text("[]")
        with patch("taskcrab.data.core.load_json_file", side_effect=FileOperationError("denied")):
            result = TaskFile(target).load()
        assert result.status == LoadStatus.READ_ERROR
        assert result.error == "denied"

    def test_save_and_load(self, tmp_path):
        """Test saved tasks load back equal."""
        task_file = TaskFile(tmp_path / "tasks.json")
        tasks = [
            Task(id=3, name="Pay rent", priority=5, due_date=DueDate(4, 1, 2025)),
            Task(id=1, name="Buy milk"),
        ]
        result = task_file.save(tasks)
        assert result.ok
        assert result.path == task_file.path
        assert task_file.load().tasks == tasks

    def test_save_failure(self, tmp_path):
        """Test save failures come back as a result."""
        task_file = TaskFile(tmp_path / "missing" / "tasks.json")
        result = task_file.save([Task(name="a")])
        assert result.ok is False
        assert "missing" in result.error


class TestTaskContext:
    """Test the load-on-enter, save-on-exit context."""

    def test_round_trip(self, tmp_path):
        """Test a second session sees the first session's tasks."""
        settings = Settings(tasks_file=tmp_path / "tasks.json")
        with TaskContext(settings) as store:
            store.add("Buy milk")
            store.add("Pay rent", 5, (4, 1, 2025))

        context = TaskContext(settings)
        with context as store:
            assert context.load_result.status == LoadStatus.LOADED
            assert store.names() == ["Pay rent", "Buy milk"]

    def test_read_only_session_creates_no_file(self, tmp_path):
        """Test a session without changes does not write a missing file."""
        target = tmp_path / "tasks.json"
        context = TaskContext(Settings(), path=target)
        with context as store:
            assert context.load_result.status == LoadStatus.MISSING
            assert len(store) == 0
        assert not target.exists()

    def test_final_persist_of_unsaved_changes(self, tmp_path):
        """Test changes made without a task file attached are written on exit."""
        target = tmp_path / "tasks.json"
        context = TaskContext(Settings(), path=target)
        with context as store:
            store.task_file = None
            store.add("offline")
            assert store.dirty
            store.task_file = context.task_file
        assert [t["name"] for t in json.loads(target.read_text())] == ["offline"]

    def test_failed_save_not_retried_on_exit(self, tmp_path):
        """Test a failed save is attempted once, not again when the session ends."""
        target = tmp_path / "missing" / "tasks.json"
        context = TaskContext(Settings(), path=target)
        with patch.object(context.task_file, "save", wraps=context.task_file.save) as save:
            with context as store:
                store.add("a")
        assert save.call_count == 1
        assert store.last_save.ok is False

    def test_corrupt_file_kept_when_untouched(self, tmp_path):
        """Test a corrupt file is not overwritten by a read-only session."""
        target = tmp_path / "tasks.json"
        target.write_text("{broken")
        context = TaskContext(Settings(), path=target)
        with context as store:
            assert context.load_result.status == LoadStatus.CORRUPT
            assert len(store) == 0
        assert target.read_text() == "{broken"

    def test_corrupt_file_replaced_after_mutation(self, tmp_path):
        """Test mutating after a failed load writes a fresh snapshot."""
        target = tmp_path / "tasks.json"
        target.write_text("{broken")
        with TaskContext(Settings(), path=target) as store:
            store.add("fresh")
        assert [t["name"] for t in json.loads(target.read_text())] == ["fresh"]
