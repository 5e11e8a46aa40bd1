"""Task and periodic rule data models."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Formats produced by the backend besides ISO-8601
_DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M:%S")


def parse_timestamp(value: Any) -> Any:
    """Normalize a backend timestamp into a datetime.

    Accepts datetimes, Unix seconds, ISO-8601 strings and the backend's
    ``"%Y-%m-%d %H:%M:%S[ %z]"`` rendering. Empty values become None.
    Anything else is handed back for pydantic to reject.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value)
    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATETIME_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        return datetime.fromisoformat(text)
    return value


def _action_ids(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [item.get("id") if isinstance(item, dict) else item for item in value]
    return value


class PeriodicInterval(IntEnum):
    """Recurrence interval of a periodic rule, in days where meaningful."""

    ON_START = 0
    DAILY = 1
    WEEKLY = 7
    MONTHLY = 30
    ONCE_STARTED = 100

    @property
    def is_schedulable(self) -> bool:
        """Whether tasks spawned by this rule belong on the calendar.

        ON_START and ONCE_STARTED fire at process start and are triggers,
        not recurring calendar items.
        """
        return self not in (PeriodicInterval.ON_START, PeriodicInterval.ONCE_STARTED)


class Task(BaseModel):
    """Task model as returned by the backend.

    Attributes:
        id: Unique identifier for the task
        name: Task title
        value: Weight of the task in progress roll-ups (defaults to 0)
        completed: Completion status
        auto: Whether associated actions run automatically
        actions: Opaque ids of associated actions
        children: Direct subtasks (one level; children carry no children)
        created_at: Creation timestamp
        due_to: Optional due date-time
        reminder: Optional reminder date-time
        periodic_rule_id: Id of the periodic rule that spawned the task
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    value: float = 0
    completed: bool = False
    auto: bool = False
    actions: list[str] = Field(default_factory=list)
    children: list[Task] = Field(default_factory=list)
    created_at: datetime
    due_to: datetime | None = None
    reminder: datetime | None = None
    periodic_rule_id: str | None = Field(default=None, alias="periodic")

    @field_validator("created_at", "due_to", "reminder", mode="before")
    @classmethod
    def _parse_timestamps(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("value", mode="before")
    @classmethod
    def _default_value(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("actions", mode="before")
    @classmethod
    def _reduce_actions(cls, value: Any) -> Any:
        return _action_ids(value)

    @field_validator("children", mode="before")
    @classmethod
    def _default_children(cls, value: Any) -> Any:
        return [] if value is None else value


class TaskData(BaseModel):
    """Payload for creating or updating a task.

    Only the fields a caller sets explicitly are considered "touched" when
    an update is merged over the known task (see ``model_fields_set``).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str
    value: float | None = None
    completed: bool = False
    auto: bool = False
    parent_id: str | None = None
    periodic_rule_id: str | None = Field(default=None, alias="periodic")
    actions: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    due_to: datetime | None = None
    reminder: datetime | None = None

    @field_validator("created_at", "due_to", "reminder", mode="before")
    @classmethod
    def _parse_timestamps(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("actions", mode="before")
    @classmethod
    def _reduce_actions(cls, value: Any) -> Any:
        return _action_ids(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the backend: wire aliases, timestamps as strings."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        for key in ("created_at", "due_to", "reminder"):
            stamp = data.get(key)
            if isinstance(stamp, datetime):
                if stamp.tzinfo is not None:
                    stamp = stamp.astimezone()
                data[key] = stamp.strftime("%Y-%m-%d %H:%M:%S")
        return data


class PeriodicTask(BaseModel):
    """Periodic rule producing tasks on an interval.

    ``last_period`` is advanced by the external scheduler after each firing;
    this package only reads it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    interval: PeriodicInterval
    last_period: int | None = None
    next_period: int | None = None
    task_template: TaskData | None = Field(default=None, alias="task")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class TaskFilters(BaseModel):
    """Filters for querying the local snapshot.

    Attributes:
        completed: Filter by completion status
        search: Case-insensitive substring of the task name
        created_after: Tasks created at or after this instant
        created_before: Tasks created at or before this instant
    """

    completed: bool | None = None
    search: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None


class TaskStats(BaseModel):
    """Counters over a task list."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    completion_rate: float = 0.0
    total_value: float = 0.0
    completed_value: float = 0.0
