from pydantic import BaseModel, Field, TypeAdapter, field_validator
from typing import Any, List, NamedTuple, Optional

MIN_PRIORITY = 1
MAX_PRIORITY = 5
DEFAULT_PRIORITY = 3

# Storage widths of the date components: month and day are bytes, year is 16 bit
MAX_MONTH = 255
MAX_DAY = 255
MAX_YEAR = 65535

def coerce_component(raw: Any, maximum: int) -> int:
    """Turn raw user input into a date component, 0 when it is not a usable integer."""
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            return 0
    if value < 0 or value > maximum:
        return 0
    return value

def coerce_priority(raw: Any) -> int:
    """Return raw as a priority in [1, 5], or the default priority."""
    if isinstance(raw, bool) or raw is None:
        return DEFAULT_PRIORITY
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    if MIN_PRIORITY <= value <= MAX_PRIORITY:
        return value
    return DEFAULT_PRIORITY

class DueDate(NamedTuple):
    """A (month, day, year) triple where 0 marks a missing component."""

    month: int = 0
    day: int = 0
    year: int = 0

    @classmethod
    def from_strings(cls, month: Any = "", day: Any = "", year: Any = "") -> 'DueDate':
        """Build a due date from raw input fields, coercing bad fields to 0."""
        return cls(
            coerce_component(month, MAX_MONTH),
            coerce_component(day, MAX_DAY),
            coerce_component(year, MAX_YEAR),
        )

    @classmethod
    def coerce(cls, value: Any) -> 'DueDate':
        """Accept a DueDate, a 3-sequence or None. Strings are not sequences of components."""
        if value is None or isinstance(value, (str, bytes)):
            return cls()
        if isinstance(value, DueDate):
            return cls.from_strings(*value)
        try:
            month, day, year = value
        except (TypeError, ValueError):
            return cls()
        return cls.from_strings(month, day, year)

    def is_set(self) -> bool:
        return any(self)

    def display(self) -> str:
        """Join the non-zero components with '/'; all zero gives ''."""
        return "/".join(str(part) for part in self if part)

class Task(BaseModel):
    """One to-do entry."""

    id: int = Field(default=0, ge=0, description="Stable identifier assigned by the store")
    name: str = Field(description="Display text of the task")
    priority: int = Field(
        default=DEFAULT_PRIORITY,
        ge=MIN_PRIORITY,
        le=MAX_PRIORITY,
        description="Urgency from 1 (lowest) to 5 (highest)"
    )
    due_date: DueDate = Field(default_factory=DueDate, description="(month, day, year), 0 means unset")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Task name must not be empty")
        return v

    @field_validator('due_date')
    @classmethod
    def validate_due_date(cls, v):
        for part, maximum in zip(v, (MAX_MONTH, MAX_DAY, MAX_YEAR)):
            if part < 0 or part > maximum:
                raise ValueError(f"Invalid due date component: {part}")
        return v

    def due_date_display(self) -> str:
        return self.due_date.display()

    def __str__(self) -> str:
        return self.name

TaskList = TypeAdapter(List[Task])

def dump_tasks(tasks: List[Task]) -> List[dict]:
    """JSON-ready representation of a task sequence."""
    return TaskList.dump_python(list(tasks), mode='json')

def parse_tasks(data: Optional[Any]) -> List[Task]:
    """Validate raw JSON data as a task list. Raises pydantic.ValidationError."""
    if data is None:
        return []
    return TaskList.validate_python(data)
