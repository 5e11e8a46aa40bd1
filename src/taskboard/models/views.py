"""View models derived from the task snapshot.

These are computed on demand for a reference date and never stored.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from .core import Task


class DayRange(BaseModel):
    """Inclusive bounds of a time span in Unix seconds."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end


class WeekDay(BaseModel):
    """One column of the weekly view."""

    day: str
    label: str
    date: dt.date
    range: DayRange


class MonthCell(BaseModel):
    """One cell of the monthly calendar grid.

    Attributes:
        date: Calendar day shown in the cell
        in_month: Whether the day belongs to the displayed month
        is_weekend: Saturday or Sunday
        is_today: Whether the day is the caller's "today"
        tasks: Tasks due on that day, in display order
    """

    date: dt.date
    in_month: bool
    is_weekend: bool
    is_today: bool = False
    tasks: list[Task] = Field(default_factory=list)


class CompletionSummary(BaseModel):
    """Value-weighted completion of a task list."""

    completed_value: float = 0.0
    total_value: float = 0.0
    progress_percent: float = 0.0
