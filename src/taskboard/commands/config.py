"""Commands 'config view/get/set/reset' of taskboard."""

from typing import Optional

import typer
from pydantic import ValidationError

from taskboard.config import get_config_manager
from taskboard.utils.ui.console import get_console
from taskboard.utils.ui.formatters import format_error, format_json, format_success

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _coerce(value: str) -> str | int | bool:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if value.isdigit():
        return int(value)
    return value


@app.command("view")
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Print the whole profile as JSON."""
    format_json(get_config_manager(profile).config.model_dump())


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Setting key (e.g. api.endpoint)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Print one setting."""
    value = get_config_manager(profile).get(key)
    if value is None:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1)
    console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Setting key (e.g. api.endpoint)"),
    value: str = typer.Argument(..., help="New value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Change one setting and save the profile."""
    parsed = _coerce(value)
    try:
        get_config_manager(profile).set(key, parsed)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1)
    except ValidationError:
        format_error(f"Invalid value '{value}' for '{key}'")
        raise typer.Exit(1)
    format_success(f"Configuration '{key}' set to '{parsed}'")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Setting to reset (default: all)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Restore defaults for one setting or the whole profile."""
    try:
        get_config_manager(profile).reset(key)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1)
    format_success(f"Configuration '{key}' reset" if key else "Configuration reset")
