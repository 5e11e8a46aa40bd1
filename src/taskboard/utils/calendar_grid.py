"""Monthly calendar matrix construction."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from taskboard.models import MonthCell, Task

from .dates import bucket_by_range, day_range, local_day, sort_for_display


def build_grid(reference: date | datetime) -> list[date]:
    """Days shown for the month containing *reference*, Monday-first.

    The grid opens with the days of the previous month that share the first
    week, lists every day of the month, then pads with days of the next
    month until its length is a multiple of 7.
    """
    ref = local_day(reference)
    first = ref.replace(day=1)
    last = first.replace(day=calendar.monthrange(ref.year, ref.month)[1])

    leading = first.isoweekday() - 1
    cells = [first - timedelta(days=leading - i) for i in range(leading)]
    cells.extend(first + timedelta(days=i) for i in range(last.day))

    remainder = len(cells) % 7
    if remainder:
        cells.extend(last + timedelta(days=i) for i in range(1, 8 - remainder))
    return cells


def is_same_month(cell: date, reference: date | datetime) -> bool:
    ref = local_day(reference)
    return cell.year == ref.year and cell.month == ref.month


def is_weekend(cell: date) -> bool:
    return cell.weekday() >= 5


def month_cells(
    reference: date | datetime,
    tasks: Iterable[Task],
    today: date | None = None,
) -> list[MonthCell]:
    """Grid cells for *reference*'s month with each day's tasks attached."""
    tasks = list(tasks)
    return [
        MonthCell(
            date=cell,
            in_month=is_same_month(cell, reference),
            is_weekend=is_weekend(cell),
            is_today=cell == today,
            tasks=sort_for_display(bucket_by_range(tasks, day_range(cell))),
        )
        for cell in build_grid(reference)
    ]
