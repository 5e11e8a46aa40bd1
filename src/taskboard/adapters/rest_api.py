"""REST API adapter - TaskTransport implementation over the backend HTTP API.

This adapter wraps the API client to implement the transport interface and
translates every HTTP or payload failure into ``TransportError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from pydantic import ValidationError

from taskboard.api.client import APIClient, get_client
from taskboard.api.periodic import PeriodicTasksAPI
from taskboard.api.tasks import TasksAPI
from taskboard.exceptions import TransportError
from taskboard.models import PeriodicTask, Task, TaskData
from taskboard.repositories.transport import TaskTransport
from taskboard.utils.logger import get_logger


def _unwrap_list(result: Any, key: str) -> list[dict]:
    # Backend answers either with a bare list or {"<key>": [...]}
    if isinstance(result, dict):
        return result.get(key, [])
    return result or []


@contextmanager
def _translate_errors(command: str) -> Iterator[None]:
    try:
        yield
    except httpx.HTTPStatusError as e:
        get_logger(__name__).error(
            "backend command %s failed: HTTP %s", command, e.response.status_code
        )
        raise TransportError(
            f"{command} failed: HTTP {e.response.status_code}", command=command
        ) from e
    except httpx.HTTPError as e:
        get_logger(__name__).error("backend command %s failed: %s", command, e)
        raise TransportError(f"{command} failed: {e}", command=command) from e
    except (ValidationError, ValueError) as e:
        get_logger(__name__).error("backend command %s returned invalid data: %s", command, e)
        raise TransportError(
            f"{command} returned an invalid payload", command=command
        ) from e


class RestApiTaskTransport(TaskTransport):
    """Task transport implementation using the REST API."""

    def __init__(self, client: APIClient | None = None):
        """Initialize REST API task transport.

        Args:
            client: APIClient to use; one is created from config on first use
        """
        self._client = client
        self._tasks_api: TasksAPI | None = None
        self._periodic_api: PeriodicTasksAPI | None = None

    @property
    def client(self) -> APIClient:
        if self._client is None:
            self._client = get_client()
        return self._client

    @property
    def tasks_api(self) -> TasksAPI:
        """Get or create TasksAPI instance."""
        if self._tasks_api is None:
            self._tasks_api = TasksAPI(self.client)
        return self._tasks_api

    @property
    def periodic_api(self) -> PeriodicTasksAPI:
        """Get or create PeriodicTasksAPI instance."""
        if self._periodic_api is None:
            self._periodic_api = PeriodicTasksAPI(self.client)
        return self._periodic_api

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def fetch_all_tasks(self) -> list[Task]:
        """Fetch every task."""
        with _translate_errors("fetch_all_tasks"):
            result = await self.tasks_api.list_tasks()
            return [Task.model_validate(item) for item in _unwrap_list(result, "tasks")]

    async def fetch_enabled_periodic_tasks(self) -> list[PeriodicTask]:
        """Fetch the enabled periodic rules."""
        with _translate_errors("fetch_enabled_periodic_tasks"):
            result = await self.periodic_api.list_periodic_tasks(enabled=True)
            return [
                PeriodicTask.model_validate(item)
                for item in _unwrap_list(result, "periodic_tasks")
            ]

    async def create_task(self, task_data: TaskData) -> str:
        """Create a new task and return its id."""
        with _translate_errors("create_task"):
            result = await self.tasks_api.create_task(task_data.to_payload())
            task_id = result.get("id") if isinstance(result, dict) else result
            if not task_id:
                raise ValueError("backend returned no task id")
            return str(task_id)

    async def update_task(self, task_id: str, task_data: TaskData) -> Task:
        """Update an existing task."""
        with _translate_errors("update_task"):
            result = await self.tasks_api.update_task(task_id, task_data.to_payload())
            return Task.model_validate(result)

    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        with _translate_errors("delete_task"):
            await self.tasks_api.delete_task(task_id)

    async def set_task_completion(self, task_id: str, completed: bool) -> Task:
        """Set the completion flag of a task."""
        with _translate_errors("set_task_completion"):
            result = await self.tasks_api.update_task_status(task_id, completed)
            return Task.model_validate(result)
