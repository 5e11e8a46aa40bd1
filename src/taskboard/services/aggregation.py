"""Completion roll-ups over a task list and toggle dispatch.

Roll-ups walk each root task and its direct children only; children never
carry children of their own.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import TYPE_CHECKING

from taskboard.exceptions import NotFoundError
from taskboard.models import CompletionSummary, Task, TaskStats
from taskboard.utils.dates import due_timestamp

if TYPE_CHECKING:
    from taskboard.services.task_repository import TaskRepository


def _with_children(tasks: Iterable[Task]) -> Iterator[Task]:
    for task in tasks:
        yield task
        yield from task.children


def aggregate(tasks: Iterable[Task]) -> CompletionSummary:
    """Sum task values, overall and for completed tasks only."""
    completed_value = 0.0
    total_value = 0.0
    for task in _with_children(tasks):
        value = task.value or 0
        total_value += value
        if task.completed:
            completed_value += value

    progress = completed_value / total_value * 100 if total_value > 0 else 0.0
    return CompletionSummary(
        completed_value=completed_value,
        total_value=total_value,
        progress_percent=progress,
    )


def count_progress(tasks: Iterable[Task]) -> int:
    """Rounded percentage of completed root tasks, by count."""
    tasks = list(tasks)
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.completed)
    return round(completed / len(tasks) * 100)


def task_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    """Counters over root tasks plus value totals including children."""
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    overdue = 0
    for task in tasks:
        due = due_timestamp(task)
        if not task.completed and due is not None and due < now.timestamp():
            overdue += 1
    summary = aggregate(tasks)
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        completion_rate=completed / total * 100 if total > 0 else 0.0,
        total_value=summary.total_value,
        completed_value=summary.completed_value,
    )


def find_task(task_id: str, tasks: Iterable[Task]) -> Task | None:
    """Locate *task_id* among the roots first, then among their children."""
    tasks = list(tasks)
    for task in tasks:
        if task.id == task_id:
            return task
    for task in tasks:
        for child in task.children:
            if child.id == task_id:
                return child
    return None


def find_parent(task_id: str, tasks: Iterable[Task]) -> Task | None:
    """Root task listing *task_id* among its children, if any."""
    tasks = list(tasks)
    if any(task.id == task_id for task in tasks):
        return None
    for task in tasks:
        if any(child.id == task_id for child in task.children):
            return task
    return None


async def toggle(task_id: str, tasks: Iterable[Task], repository: TaskRepository) -> str:
    """Flip completion of a root task or subtask through the repository.

    Raises:
        NotFoundError: If *task_id* is neither a root nor a direct child
    """
    task = find_task(task_id, tasks)
    if task is None:
        raise NotFoundError(task_id)
    await repository.toggle_completion(task.id)
    return task.id
