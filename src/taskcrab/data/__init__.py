"""
Data management submodule: the task file and the store context built on it.
"""

from .core import TaskFile, TaskContext, LoadResult, LoadStatus, SaveResult
from .io import atomic_write, load_json_file

__all__ = [
    'TaskFile',
    'TaskContext',
    'LoadResult',
    'LoadStatus',
    'SaveResult',
    'atomic_write',
    'load_json_file',
]
