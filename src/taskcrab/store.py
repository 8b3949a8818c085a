"""
TaskStore - the in-memory, authoritative list of tasks.

The store keeps tasks ordered by descending priority (stable, so equal
priorities keep insertion order), hands out stable ids, and persists the whole
list through its task file after every mutation. None of its operations raise
on bad input; persistence failures end up in ``last_save``.
"""
from typing import Any, Iterator, List, Optional
from taskcrab.models import Task, DueDate, coerce_priority, DEFAULT_PRIORITY
from taskcrab.logs import get_logger

log = get_logger("store")

def sort_tasks(tasks: List[Task]) -> List[Task]:
    """Sort tasks in place by descending priority. list.sort is stable."""
    tasks.sort(key=lambda task: task.priority, reverse=True)
    return tasks

def due_date_display(task: Task) -> str:
    return task.due_date.display()

class TaskStore:

    def __init__(self, tasks: Optional[List[Task]] = None, task_file=None):
        self._tasks: List[Task] = sort_tasks(list(tasks or []))
        self.task_file = task_file
        self.next_id = max((t.id for t in self._tasks), default=-1) + 1
        self.last_save = None
        self.dirty = False

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def names(self) -> List[str]:
        return [t.name for t in self._tasks]

    def get(self, task_id: int) -> Optional[Task]:
        """Find a task by its stable id."""
        return next((t for t in self._tasks if t.id == task_id), None)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __getitem__(self, index: int) -> Task:
        return self._tasks[index]

    def add(self, name: str, priority: Any = DEFAULT_PRIORITY, due_date: Any = None) -> Optional[Task]:
        """
        Add a task and re-sort the list.

        Args:
            name: task text; blank names are ignored
            priority: 1..5, anything else falls back to the default
            due_date: (month, day, year); unusable components become 0

        Returns:
            The new task, or None when the name was blank.
        """
        if not isinstance(name, str) or not name.strip():
            log.debug("Ignoring task with empty name")
            return None

        task = Task(
            id=self.next_id,
            name=name,
            priority=coerce_priority(priority),
            due_date=DueDate.coerce(due_date),
        )
        self.next_id += 1
        self._tasks.append(task)
        self.dirty = True
        sort_tasks(self._tasks)
        log.info(f"Added task {task.id} '{task.name}' (priority {task.priority})")
        self.persist()
        return task

    def delete(self, index: int) -> bool:
        """Remove the task at a list position. Out of range is a no-op returning False."""
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if index < 0 or index >= len(self._tasks):
            log.debug(f"Delete index {index} out of range for {len(self._tasks)} tasks")
            return False

        task = self._tasks.pop(index)
        self.dirty = True
        log.info(f"Deleted task {task.id} '{task.name}' at position {index}")
        self.persist()
        return True

    def clear(self):
        """Remove every task."""
        self._tasks.clear()
        self.dirty = True
        log.info("Cleared all tasks")
        self.persist()

    def due_date_display(self, task: Task) -> str:
        return due_date_display(task)

    def persist(self):
        """Write the full list through the task file, if there is one. Failed saves are not retried."""
        if self.task_file is None:
            return None
        self.last_save = self.task_file.save(self._tasks)
        self.dirty = False
        return self.last_save
