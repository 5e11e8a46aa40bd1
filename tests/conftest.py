"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/backend state.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from unittest.mock import patch

import pytest

from taskboard.exceptions import TransportError
from taskboard.models import PeriodicTask, Task, TaskData
from taskboard.repositories.transport import TaskTransport

_CREATED = datetime(2024, 1, 1, 9, 0, 0)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def isolated_log_dir(tmp_path_factory):
    """Keep the rotating log file out of the user's log directory."""
    log_dir = str(tmp_path_factory.mktemp("logs"))
    with patch("taskboard.utils.logger.user_log_dir", return_value=log_dir):
        yield log_dir


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a fresh global ConfigManager backed by a temporary directory."""
    import taskboard.config as config_module

    config_module._config_manager = None
    with patch("taskboard.config.user_config_dir", return_value=str(tmp_path)):
        yield config_module.get_config_manager()
    config_module._config_manager = None


# ---------------------------------------------------------------------------
# Task factory
# ---------------------------------------------------------------------------


def _make_task(task_id: str = "task-1", **fields) -> Task:
    fields.setdefault("name", f"Task {task_id}")
    fields.setdefault("created_at", _CREATED)
    return Task(id=task_id, **fields)


@pytest.fixture()
def make_task():
    """Factory building a Task with sensible defaults."""
    return _make_task


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


class FakeTransport(TaskTransport):
    """In-memory backend recording every command it receives.

    - ``fail_on``: command names that raise TransportError
    - ``hidden``: task ids the backend stores but never lists
    """

    def __init__(self, tasks=(), rules=()):
        self.tasks: dict[str, Task] = {task.id: task for task in tasks}
        self.rules: list[PeriodicTask] = list(rules)
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.hidden: set[str] = set()
        self._counter = 0

    async def _command(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        # Yield so concurrent callers get a chance to interleave
        await asyncio.sleep(0)
        if name in self.fail_on:
            raise TransportError(f"{name} failed", command=name)

    def command_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def fetch_all_tasks(self) -> list[Task]:
        await self._command("fetch_all_tasks")
        return [
            task.model_copy(deep=True)
            for task_id, task in self.tasks.items()
            if task_id not in self.hidden
        ]

    async def fetch_enabled_periodic_tasks(self) -> list[PeriodicTask]:
        await self._command("fetch_enabled_periodic_tasks")
        return list(self.rules)

    async def create_task(self, task_data: TaskData) -> str:
        await self._command("create_task", task_data)
        self._counter += 1
        task_id = task_data.id or f"new-{self._counter}"
        task = Task(
            id=task_id,
            name=task_data.name,
            value=task_data.value or 0,
            completed=task_data.completed,
            periodic=task_data.periodic_rule_id,
            due_to=task_data.due_to,
            created_at=task_data.created_at or _CREATED,
        )
        if task_data.parent_id:
            parent = self.tasks[task_data.parent_id]
            self.tasks[parent.id] = parent.model_copy(
                update={"children": [*parent.children, task]}
            )
        else:
            self.tasks[task_id] = task
        return task_id

    def _patch(self, command: str, task_id: str, **fields) -> Task:
        for root_id, root in self.tasks.items():
            if root.id == task_id:
                self.tasks[root_id] = root.model_copy(update=fields)
                return self.tasks[root_id]
            for index, child in enumerate(root.children):
                if child.id == task_id:
                    children = list(root.children)
                    children[index] = child.model_copy(update=fields)
                    self.tasks[root_id] = root.model_copy(update={"children": children})
                    return children[index]
        raise TransportError(f"unknown task {task_id}", command=command)

    async def update_task(self, task_id: str, task_data: TaskData) -> Task:
        await self._command("update_task", task_id, task_data)
        return self._patch(
            "update_task",
            task_id,
            name=task_data.name,
            value=task_data.value or 0,
            completed=task_data.completed,
            due_to=task_data.due_to,
            periodic_rule_id=task_data.periodic_rule_id,
        )

    async def delete_task(self, task_id: str) -> None:
        await self._command("delete_task", task_id)
        self.tasks.pop(task_id, None)

    async def set_task_completion(self, task_id: str, completed: bool) -> Task:
        await self._command("set_task_completion", task_id, completed)
        return self._patch("set_task_completion", task_id, completed=completed)


@pytest.fixture()
def fake_transport():
    return FakeTransport()
