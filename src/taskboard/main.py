"""Main entry point for the taskboard CLI."""

import typer

from taskboard import __version__
from taskboard.commands import config
from taskboard.commands.tasks import startup_command, sync_command, toggle_command
from taskboard.commands.views import month_command, today_command, week_command
from taskboard.utils.ui.console import get_console

app = typer.Typer(
    name="taskboard",
    help="Today, weekly and monthly views of your tasks",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(config.app, name="config", help="Configuration management")

app.command("today")(today_command)
app.command("week")(week_command)
app.command("month")(month_command)
app.command("toggle")(toggle_command)
app.command("sync")(sync_command)
app.command("startup")(startup_command)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]taskboard[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
