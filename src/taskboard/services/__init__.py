"""Service layer - snapshot ownership and the pure view computations."""

from .aggregation import aggregate, count_progress, find_task, task_stats, toggle
from .periodic_filter import filter_tasks, schedulable_rules
from .task_repository import TaskRepository, create_repository

__all__ = [
    "TaskRepository",
    "create_repository",
    "filter_tasks",
    "schedulable_rules",
    "aggregate",
    "count_progress",
    "find_task",
    "task_stats",
    "toggle",
]
