"""Transport interfaces for taskboard.

This package contains the abstract base class that defines the contract for
backend task commands. This is the "Port" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- taskboard.adapters.rest_api (remote API)
"""

from .transport import TASK_CHANGED_EVENT, TaskTransport

__all__ = [
    "TaskTransport",
    "TASK_CHANGED_EVENT",
]
