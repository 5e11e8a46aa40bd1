"""Taskboard domain models.

This package contains Pydantic models for the backend entities (tasks and
periodic rules) and for the views derived from them.
"""

from .core import (
    PeriodicInterval,
    PeriodicTask,
    Task,
    TaskData,
    TaskFilters,
    TaskStats,
    parse_timestamp,
)
from .views import CompletionSummary, DayRange, MonthCell, WeekDay

__all__ = [
    # Task models
    "Task",
    "TaskData",
    "TaskFilters",
    "TaskStats",
    "parse_timestamp",
    # Periodic rule models
    "PeriodicInterval",
    "PeriodicTask",
    # View models
    "DayRange",
    "WeekDay",
    "MonthCell",
    "CompletionSummary",
]
