"""Shared rich console for taskboard output."""

from functools import lru_cache

from rich.console import Console
from rich.theme import Theme

# Styles used by the schedule views
THEME = Theme(
    {
        "task.done": "dim strike",
        "task.overdue": "red",
        "task.value": "cyan",
        "cell.today": "bold reverse",
        "cell.outside": "dim",
        "cell.weekend": "italic",
    }
)


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Console with the taskboard theme applied."""
    return Console(highlight=highlight, theme=THEME)
