"""
TaskFile - persistence for the task list, plus the TaskContext that ties a
TaskStore to its file for the length of one session.

Loading and saving never raise: the outcome is returned as a LoadResult or a
SaveResult so the caller can tell "no data yet" apart from a real failure and
decide whether to tell the user.
"""
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, Field, ValidationError
from taskcrab.recovery import CorruptionError, FatalError, FileOperationError
from taskcrab.models import Task, dump_tasks, parse_tasks
from taskcrab.store import TaskStore, sort_tasks
from taskcrab.config import Settings, load_settings
from taskcrab.logs import get_logger
from .io import atomic_write, load_json_file

log = get_logger("data")

class LoadStatus(Enum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"
    READ_ERROR = "read_error"

class LoadResult(BaseModel):
    status: LoadStatus = Field(description="What happened when reading the file")
    tasks: List[Task] = Field(default_factory=list, description="Loaded tasks, sorted by priority")
    error: Optional[str] = Field(default=None, description="Failure message for CORRUPT and READ_ERROR")

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.LOADED, LoadStatus.MISSING)

class SaveResult(BaseModel):
    ok: bool = Field(description="True when the snapshot reached the disk")
    path: Path = Field(description="File that was written")
    error: Optional[str] = Field(default=None, description="Failure message when ok is False")

def _reassign_duplicate_ids(tasks: List[Task]) -> List[Task]:
    """Older files used list positions as ids; give repeated ids fresh values."""
    seen = set()
    next_id = max((t.id for t in tasks), default=-1) + 1
    for task in tasks:
        if task.id in seen:
            log.debug(f"Reassigning duplicate id {task.id} on '{task.name}' to {next_id}")
            task.id = next_id
            next_id += 1
        seen.add(task.id)
    return tasks

class TaskFile:
    """The JSON file holding the whole task list."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    def load(self) -> LoadResult:
        try:
            data = load_json_file(self.path)
        except CorruptionError as e:
            log.warning(str(e))
            return LoadResult(status=LoadStatus.CORRUPT, error=str(e))
        except FileOperationError as e:
            log.warning(str(e))
            return LoadResult(status=LoadStatus.READ_ERROR, error=str(e))

        if data is None:
            log.debug(f"No task file at {self.path}, starting empty")
            return LoadResult(status=LoadStatus.MISSING)

        try:
            tasks = parse_tasks(data)
        except ValidationError as e:
            error_msg = f"Task file {self.path} does not hold a valid task list: {e}"
            log.warning(error_msg)
            return LoadResult(status=LoadStatus.CORRUPT, error=error_msg)

        sort_tasks(_reassign_duplicate_ids(tasks))
        log.debug(f"Loaded {len(tasks)} tasks from {self.path}")
        return LoadResult(status=LoadStatus.LOADED, tasks=tasks)

    def save(self, tasks: List[Task]) -> SaveResult:
        try:
            atomic_write(self.path, dump_tasks(tasks))
        except (FileOperationError, FatalError) as e:
            log.error(f"Tasks not saved, file is now stale: {e}")
            return SaveResult(ok=False, path=self.path, error=str(e))
        return SaveResult(ok=True, path=self.path)

class TaskContext:
    """Loads a TaskStore on entry and writes it back on exit."""

    def __init__(self, settings: Optional[Settings] = None, path: Union[Path, str, None] = None):
        self.settings = settings or load_settings()
        self.task_file = TaskFile(path if path is not None else self.settings.tasks_file)
        self.load_result: Optional[LoadResult] = None
        self.store: Optional[TaskStore] = None

    def __enter__(self) -> TaskStore:
        self.load_result = self.task_file.load()
        if not self.load_result.ok:
            log.warning(f"Starting with an empty task list: {self.load_result.error}")
        self.store = TaskStore(self.load_result.tasks, task_file=self.task_file)
        return self.store

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Final persist of changes not yet written."""
        if self.store is None or not self.store.dirty:
            # Read-only sessions leave the file (missing or unreadable) as it is
            return
        self.store.persist()
