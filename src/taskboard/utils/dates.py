"""Date ranges and due-date bucketing for the Today / Weekly / Monthly views.

All ranges are computed in local time and expressed as whole Unix seconds,
inclusive on both ends. A task without ``due_to`` belongs to no date bucket.
"""

from __future__ import annotations

import calendar
import math
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from taskboard.models import DayRange, Task, WeekDay

_END_OF_DAY = time(23, 59, 59, 999000)

WEEK_DAYS: tuple[tuple[str, str], ...] = (
    ("monday", "Mon"),
    ("tuesday", "Tue"),
    ("wednesday", "Wed"),
    ("thursday", "Thu"),
    ("friday", "Fri"),
    ("saturday", "Sat"),
    ("sunday", "Sun"),
)


def to_timestamp(value: datetime) -> int:
    """Unix seconds of *value*, truncated. Naive datetimes are local time."""
    return math.floor(value.timestamp())


def local_day(value: date | datetime) -> date:
    """Calendar date of *value* in local time; aware datetimes are converted first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def day_range(value: date | datetime) -> DayRange:
    """Bounds of the local calendar day containing *value*."""
    day = local_day(value)
    return DayRange(
        start=to_timestamp(datetime.combine(day, time.min)),
        end=to_timestamp(datetime.combine(day, _END_OF_DAY)),
    )


def month_range(value: date | datetime) -> DayRange:
    """Bounds of the local calendar month containing *value*."""
    day = local_day(value)
    last = calendar.monthrange(day.year, day.month)[1]
    return DayRange(
        start=day_range(day.replace(day=1)).start,
        end=day_range(day.replace(day=last)).end,
    )


def due_timestamp(task: Task) -> int | None:
    """Unix seconds of the task's due date, or None when it has none."""
    if task.due_to is None:
        return None
    return to_timestamp(task.due_to)


def is_today_or_overdue(task: Task, now: datetime) -> bool:
    """Whether *task* belongs in the Today bucket.

    A task qualifies when it is due today, or when it is past due and still
    incomplete; overdue work stays in Today until it is resolved.
    """
    due = due_timestamp(task)
    if due is None:
        return False
    if day_range(now).contains(due):
        return True
    return due <= now.timestamp() and not task.completed


def week_ranges(anchor: date | datetime) -> list[WeekDay]:
    """The seven days (Monday first) of the week containing *anchor*."""
    day = local_day(anchor)
    monday = day - timedelta(days=day.weekday())
    week = []
    for offset, (key, label) in enumerate(WEEK_DAYS):
        current = monday + timedelta(days=offset)
        week.append(WeekDay(day=key, label=label, date=current, range=day_range(current)))
    return week


def bucket_by_range(tasks: Iterable[Task], span: DayRange) -> list[Task]:
    """Tasks whose due date falls within *span*."""
    bucket = []
    for task in tasks:
        due = due_timestamp(task)
        if due is not None and span.contains(due):
            bucket.append(task)
    return bucket


def _display_key(task: Task) -> tuple[bool, float]:
    due = due_timestamp(task)
    # Undated tasks go last within their partition
    return task.completed, -due if due is not None else math.inf


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Order a bucket for rendering.

    Incomplete tasks come before completed ones; within each partition tasks
    are ordered by due date, latest first.
    """
    return sorted(tasks, key=_display_key)


def today_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Today bucket (due today, or overdue and incomplete) in display order."""
    return sort_for_display(task for task in tasks if is_today_or_overdue(task, now))


def week_buckets(
    tasks: Iterable[Task], anchor: date | datetime
) -> list[tuple[WeekDay, list[Task]]]:
    """Pair each day of the anchor's week with its tasks in display order."""
    tasks = list(tasks)
    return [
        (week_day, sort_for_display(bucket_by_range(tasks, week_day.range)))
        for week_day in week_ranges(anchor)
    ]
