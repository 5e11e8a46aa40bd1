"""Commands 'toggle', 'sync' and 'startup' of taskboard."""

from datetime import datetime

import typer

from taskboard.services.aggregation import toggle
from taskboard.services.periodic_filter import startup_rules
from taskboard.utils.ui.formatters import format_info, format_json, format_success, render_startup

from .decorators import command_wrapper
from .utils import loaded_repository

app = typer.Typer()


@app.command("toggle")
@command_wrapper
async def toggle_command(
    task_id: str = typer.Argument(..., help="Task or subtask ID"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Flip the completion state of a task or subtask."""
    async with loaded_repository(profile) as repository:
        toggled = await toggle(task_id, repository.tasks, repository)
        task = repository.get_task(toggled)

    state = "completed" if task is not None and task.completed else "pending"
    format_success(f"Task {toggled} is now {state}")


@app.command("sync")
@command_wrapper
async def sync_command(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Fetch the snapshot and print a summary."""
    async with loaded_repository(profile) as repository:
        stats = repository.stats(datetime.now())
        rules = len(repository.periodic_tasks)

    format_info(
        f"{stats.total} tasks ({stats.completed} completed, {stats.pending} pending, "
        f"{stats.overdue} overdue), {rules} enabled periodic rules"
    )


@app.command("startup")
@command_wrapper
async def startup_command(
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List the enabled rules that fire at scheduler start-up."""
    async with loaded_repository(profile) as repository:
        rules = startup_rules(repository.periodic_tasks)

    if json_opt:
        format_json([rule.model_dump(mode="json") for rule in rules])
        return
    render_startup(rules)
