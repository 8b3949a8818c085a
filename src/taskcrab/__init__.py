"""
TaskCrab - a single-user to-do list ordered by priority and kept in a JSON file.
"""

from .version import VERSION
from .models import Task, DueDate, DEFAULT_PRIORITY, MIN_PRIORITY, MAX_PRIORITY
from .store import TaskStore, sort_tasks, due_date_display
from .data import TaskFile, TaskContext, LoadResult, LoadStatus, SaveResult

__version__ = VERSION

__all__ = [
    "VERSION",
    "Task",
    "DueDate",
    "DEFAULT_PRIORITY",
    "MIN_PRIORITY",
    "MAX_PRIORITY",
    "TaskStore",
    "sort_tasks",
    "due_date_display",
    "TaskFile",
    "TaskContext",
    "LoadResult",
    "LoadStatus",
    "SaveResult",
]
