"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from taskboard.exceptions import TaskboardError
from taskboard.utils.exit_codes import ERROR_GENERAL, get_exit_code_description, get_exit_code_name
from taskboard.utils.logger import get_logger
from taskboard.utils.ui.console import get_console
from taskboard.utils.ui.formatters import format_error

console = get_console()


def command_wrapper(func: Callable):
    """Run sync or async command bodies with logging and error mapping."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(__name__)
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except TaskboardError as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) %s - %s",
                cmd,
                elapsed,
                get_exit_code_name(e.exit_code),
                e,
            )
            format_error(str(e))
            if e.exit_code != ERROR_GENERAL:
                console.print(f"[dim]{get_exit_code_description(e.exit_code)}[/dim]")
            raise typer.Exit(code=e.exit_code) from e

        except typer.Exit:
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=1) from e

    return wrapper
