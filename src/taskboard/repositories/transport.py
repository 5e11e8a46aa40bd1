"""Transport abstraction for taskboard.

This module defines the abstract base class (interface) for the backend that
owns the authoritative task data, following the Ports & Adapters pattern.

The local ``TaskRepository`` only ever talks to the backend through this
interface, so the snapshot logic stays independent of the wire (REST API,
IPC bridge, in-process fake).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskboard.models import PeriodicTask, Task, TaskData

# Name of the channel on which other processes announce task changes
TASK_CHANGED_EVENT = "task-changed"


class TaskTransport(ABC):
    """Abstract base class for backend task commands.

    Every method is a single request/response command. Implementations
    raise ``TransportError`` for any backend failure.
    """

    @abstractmethod
    async def fetch_all_tasks(self) -> list[Task]:
        """Fetch every task, with children attached to their parent.

        Returns:
            List of root Task objects

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.fetch_all_tasks() must be implemented by adapter"
        )

    @abstractmethod
    async def fetch_enabled_periodic_tasks(self) -> list[PeriodicTask]:
        """Fetch the periodic rules that are currently enabled.

        Returns:
            List of PeriodicTask objects

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.fetch_enabled_periodic_tasks() must be implemented by adapter"
        )

    @abstractmethod
    async def create_task(self, task_data: TaskData) -> str:
        """Create a new task.

        Args:
            task_data: TaskData object with task details

        Returns:
            Identifier assigned to the new task

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.create_task() must be implemented by adapter"
        )

    @abstractmethod
    async def update_task(self, task_id: str, task_data: TaskData) -> Task:
        """Replace the editable fields of a task.

        Args:
            task_id: Unique identifier for the task
            task_data: Full TaskData payload

        Returns:
            Updated Task object

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.update_task() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Args:
            task_id: Unique identifier for the task

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.delete_task() must be implemented by adapter"
        )

    @abstractmethod
    async def set_task_completion(self, task_id: str, completed: bool) -> Task:
        """Set the completion flag of a task.

        Args:
            task_id: Unique identifier for the task
            completed: New completion status

        Returns:
            Updated Task object

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            TransportError: If the backend command fails
        """
        raise NotImplementedError(
            "TaskTransport.set_task_completion() must be implemented by adapter"
        )

    async def close(self) -> None:
        """Release backend resources (connections, sessions)."""
        return None
