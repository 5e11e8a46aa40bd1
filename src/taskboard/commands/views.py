"""Commands 'today', 'week' and 'month' of taskboard."""

from datetime import date, datetime

import typer

from taskboard.config import get_config_manager
from taskboard.exceptions import TaskboardError
from taskboard.models import Task
from taskboard.services.aggregation import aggregate, count_progress
from taskboard.utils.calendar_grid import month_cells
from taskboard.utils.dates import bucket_by_range, month_range, today_tasks, week_buckets
from taskboard.utils.exit_codes import ERROR_INVALID_ARGS
from taskboard.utils.ui.formatters import (
    format_json,
    render_month,
    render_today,
    render_week,
    tasks_to_dicts,
)

from .decorators import command_wrapper
from .utils import loaded_repository

app = typer.Typer()


def _visible(tasks: list[Task], profile: str) -> list[Task]:
    if get_config_manager(profile).config.display.show_completed:
        return tasks
    return [task for task in tasks if not task.completed]


def _parse_month(value: str | None, today: date) -> date:
    if value is None:
        return today
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError as e:
        raise TaskboardError(
            f"Invalid month '{value}', expected YYYY-MM", exit_code=ERROR_INVALID_ARGS
        ) from e


@app.command("today")
@command_wrapper
async def today_command(
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show tasks due today plus incomplete overdue tasks."""
    now = datetime.now()
    async with loaded_repository(profile) as repository:
        tasks = today_tasks(repository.tasks, now)
    summary = aggregate(tasks)
    tasks = _visible(tasks, profile)

    if json_opt:
        format_json({"tasks": tasks_to_dicts(tasks), "summary": summary.model_dump()})
        return
    render_today(tasks, summary, now)


@app.command("week")
@command_wrapper
async def week_command(
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show this week's tasks, one column per day starting Monday."""
    now = datetime.now()
    async with loaded_repository(profile) as repository:
        buckets = week_buckets(repository.tasks, now)

    rows = [
        (week_day, _visible(tasks, profile), count_progress(tasks))
        for week_day, tasks in buckets
    ]
    if json_opt:
        format_json(
            [
                {
                    "day": week_day.day,
                    "date": week_day.date.isoformat(),
                    "progress": percent,
                    "tasks": tasks_to_dicts(tasks),
                }
                for week_day, tasks, percent in rows
            ]
        )
        return
    render_week(rows, now)


@app.command("month")
@command_wrapper
async def month_command(
    month: str = typer.Option(None, "--month", "-m", help="Month to show (YYYY-MM)"),
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show the calendar grid of a month."""
    now = datetime.now()
    reference = _parse_month(month, now.date())
    async with loaded_repository(profile) as repository:
        snapshot = list(repository.tasks)

    cells = month_cells(reference, _visible(snapshot, profile), today=now.date())
    progress = count_progress(bucket_by_range(snapshot, month_range(reference)))

    if json_opt:
        format_json(
            {
                "month": reference.strftime("%Y-%m"),
                "progress": progress,
                "cells": [
                    {
                        "date": cell.date.isoformat(),
                        "in_month": cell.in_month,
                        "is_weekend": cell.is_weekend,
                        "tasks": [task.id for task in cell.tasks],
                    }
                    for cell in cells
                ],
            }
        )
        return
    render_month(cells, reference, progress, now)
