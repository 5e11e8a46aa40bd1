"""Rich renderers for the Today / Weekly / Monthly views."""

import json
from datetime import date, datetime
from typing import Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskboard.models import CompletionSummary, MonthCell, PeriodicTask, Task, WeekDay

from .console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def format_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def tasks_to_dicts(tasks: list[Task]) -> list[dict]:
    return [task.model_dump(mode="json") for task in tasks]


def get_progress_bar(percentage: float) -> str:
    """Get a progress bar representation."""
    filled = int(percentage / 10)
    empty = 10 - filled
    return "▓" * filled + "░" * empty


def get_completion_color(percentage: float) -> str:
    """Get color based on completion percentage."""
    if percentage >= 80:
        return "green"
    if percentage >= 40:
        return "yellow"
    return "red"


def format_due_date(due: datetime | None, now: datetime | None = None) -> str:
    """Format due date in compact format: HH:MM DD/MM DayOfWeek."""
    if due is None:
        return "-"
    if due.tzinfo is not None:
        due = due.astimezone()
    now = now or datetime.now()

    day_str = due.strftime("%d/%m") if due.year == now.year else due.strftime("%d/%m/%Y")
    return f"{due.strftime('%H:%M')} {day_str} {due.strftime('%a')}"


def _task_line(task: Task, now: datetime) -> Text:
    mark = "✓" if task.completed else "○"
    style = "task.done" if task.completed else ""
    if not task.completed and task.due_to is not None and task.due_to.timestamp() < now.timestamp():
        style = "task.overdue"
    line = Text(f"{mark} {task.name}", style=style)
    if task.value:
        line.append(f" ({task.value:g})", style="task.value")
    return line


def render_task_table(tasks: list[Task], now: datetime, title: str | None = None) -> Table:
    """Task rows with their direct subtasks indented beneath."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Task")
    table.add_column("Due")

    for task in tasks:
        table.add_row(task.id, _task_line(task, now), format_due_date(task.due_to, now))
        for child in task.children:
            child_line = Text("  └ ").append(_task_line(child, now))
            table.add_row(child.id, child_line, format_due_date(child.due_to, now))
    return table


def render_today(tasks: list[Task], summary: CompletionSummary, now: datetime) -> None:
    if summary.total_value > 0:
        color = get_completion_color(summary.progress_percent)
        console.print(
            f"[{color}]{get_progress_bar(summary.progress_percent)}[/{color}] "
            f"{summary.completed_value:g} / {summary.total_value:g} completed"
        )
    if not tasks:
        console.print("[green]Nothing due today.[/green]")
        return
    console.print(render_task_table(tasks, now, title=f"Today ({now.date().isoformat()})"))


def render_week(buckets: list[tuple[WeekDay, list[Task], int]], now: datetime) -> None:
    for week_day, tasks, percent in buckets:
        header = f"{week_day.label} {week_day.date.strftime('%d/%m')}"
        if week_day.date == now.date():
            header = f"[bold]{header}[/bold]"
        if not tasks:
            console.print(Panel("[dim]No tasks[/dim]", title=header, title_align="left"))
            continue
        color = get_completion_color(percent)
        body = Text()
        for index, task in enumerate(tasks):
            if index:
                body.append("\n")
            body.append(_task_line(task, now))
        console.print(
            Panel(
                body,
                title=header,
                subtitle=f"[{color}]{percent}% completed[/{color}]",
                title_align="left",
            )
        )


def render_month(cells: list[MonthCell], reference: date, progress: float, now: datetime) -> None:
    table = Table(
        title=f"{reference.strftime('%B %Y')} - {progress:.0f}% completed",
        show_lines=True,
    )
    for label in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(label, justify="left", vertical="top")

    for week_start in range(0, len(cells), 7):
        row = []
        for cell in cells[week_start : week_start + 7]:
            style = ""
            if cell.is_today:
                style = "cell.today"
            elif not cell.in_month:
                style = "cell.outside"
            elif cell.is_weekend:
                style = "cell.weekend"
            text = Text(str(cell.date.day), style=style)
            for task in cell.tasks:
                text.append("\n")
                text.append(_task_line(task, now))
            row.append(text)
        table.add_row(*row)
    console.print(table)


def format_last_run(last_period: int | None) -> str:
    if not last_period:
        return "never"
    return datetime.fromtimestamp(last_period).strftime("%Y-%m-%d %H:%M")


def render_startup(rules: list[PeriodicTask]) -> None:
    if not rules:
        console.print("[dim]No start-up rules configured.[/dim]")
        return
    table = Table(title="Start-up rules")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Interval")
    table.add_column("Value", justify="right")
    table.add_column("Last run")
    for rule in rules:
        template = rule.task_template
        value = template.value if template is not None and template.value else 0
        table.add_row(
            rule.id,
            rule.name,
            rule.interval.name.replace("_", " ").lower(),
            f"{value:g}",
            format_last_run(rule.last_period),
        )
    console.print(table)
