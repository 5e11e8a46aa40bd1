"""Logging setup for taskboard.

One rotating log file is shared by the whole package. Modules ask for a
child of the ``taskboard`` logger so each record names its origin::

    logger = get_logger(__name__)   # -> "taskboard.services.task_repository"
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

ROOT_LOGGER = "taskboard"
LOG_FILE = "taskboard.log"
LEVEL_ENV = "TASKBOARD_LOG_LEVEL"

_ROTATE_AT = 5 * 1024 * 1024
_KEEP = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_root: logging.Logger | None = None


def _file_handler(root: logging.Logger) -> logging.handlers.RotatingFileHandler | None:
    for handler in root.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return handler
    return None


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(os.environ.get(LEVEL_ENV, "DEBUG").upper())

    # Other handlers (e.g. a test harness capture) do not count as the log file
    if _file_handler(root) is None:
        log_path = Path(user_log_dir(ROOT_LOGGER)) / LOG_FILE
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=_ROTATE_AT, backupCount=_KEEP, encoding="utf-8"
        )
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        root.addHandler(handler)
    # Keep records out of the terminal; the CLI prints through rich
    root.propagate = False
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or the child logger for *name*.

    The file handler is attached on first use. *name* may be a module's
    ``__name__``; names outside the package are nested under it.
    """
    global _root
    if _root is None:
        _root = _configure_root()
    if not name or name == ROOT_LOGGER:
        return _root
    suffix = name.removeprefix(f"{ROOT_LOGGER}.")
    return _root.getChild(suffix)
