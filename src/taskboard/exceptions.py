"""Error taxonomy for taskboard.

Every error carries the exit code the CLI reports for it, so the command
layer can translate failures without inspecting their type.
"""

from __future__ import annotations

from taskboard.utils.exit_codes import ERROR_GENERAL, ERROR_NETWORK, ERROR_NOT_FOUND


class TaskboardError(Exception):
    """Base application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


class TransportError(TaskboardError):
    """A backend command failed (network fault, HTTP error, bad payload)."""

    def __init__(self, message: str, *, command: str | None = None):
        super().__init__(message, exit_code=ERROR_NETWORK)
        self.command = command


class NotFoundError(TaskboardError):
    """An expected task is missing from the local snapshot.

    Raised after a refresh when the backend acknowledged a write but the
    entity cannot be located, i.e. backend and local view disagree.
    """

    def __init__(self, task_id: str, message: str | None = None):
        super().__init__(message or f"Task not found: {task_id}", exit_code=ERROR_NOT_FOUND)
        self.task_id = task_id
