"""Task repository - the authoritative local snapshot of the user's tasks.

The repository sits between the views and the backend transport. It keeps
one snapshot of all tasks eligible for the schedule views and follows a
write-then-refetch policy: after every mutation except a completion toggle
the whole snapshot is re-derived from the backend instead of being patched
locally. Fetches and mutations are serialized per repository, so two
overlapping mutations can never interleave their refetches.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from typing import Any

from taskboard.exceptions import NotFoundError
from taskboard.models import PeriodicTask, Task, TaskData, TaskFilters, TaskStats
from taskboard.repositories.transport import TASK_CHANGED_EVENT, TaskTransport
from taskboard.services.aggregation import find_parent, find_task, task_stats
from taskboard.services.periodic_filter import filter_tasks
from taskboard.utils.logger import get_logger

SnapshotListener = Callable[[tuple[Task, ...]], None]
ChangeHandler = Callable[[Any], Awaitable[Any]]
SubscribeFn = Callable[[str, ChangeHandler], Callable[[], None]]

# Fields carried over from the known task when an update leaves them unset
_MERGED_FIELDS = (
    "value",
    "completed",
    "auto",
    "actions",
    "due_to",
    "reminder",
    "periodic_rule_id",
)


def _with_completion(task: Task, task_id: str, completed: bool) -> Task:
    if task.id == task_id:
        return task.model_copy(update={"completed": completed})
    if any(child.id == task_id for child in task.children):
        children = [
            child.model_copy(update={"completed": completed}) if child.id == task_id else child
            for child in task.children
        ]
        return task.model_copy(update={"children": children})
    return task


class TaskRepository:
    """Owns the task snapshot and the mutation API.

    Args:
        transport: Backend the snapshot is synchronized with
    """

    def __init__(self, transport: TaskTransport):
        self.transport = transport
        self._tasks: tuple[Task, ...] = ()
        self._periodic_tasks: tuple[PeriodicTask, ...] = ()
        self._current_task: Task | None = None
        self._listeners: list[SnapshotListener] = []
        self._lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # -- snapshot -------------------------------------------------------

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Current snapshot, root tasks only."""
        return self._tasks

    @property
    def periodic_tasks(self) -> tuple[PeriodicTask, ...]:
        """Enabled periodic rules seen on the last full fetch."""
        return self._periodic_tasks

    @property
    def current_task(self) -> Task | None:
        return self._current_task

    def set_current_task(self, task: Task | None) -> None:
        self._current_task = task

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with the new snapshot whenever it changes.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._tasks)
            except Exception:
                # Listener failures never fail the mutation
                self._logger.exception("snapshot listener %r failed", listener)

    def _find(self, task_id: str) -> Task | None:
        return find_task(task_id, self._tasks)

    def _require(self, task_id: str) -> Task:
        task = self._find(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def _refresh(self) -> list[Task]:
        # Both reads must succeed before the snapshot is swapped
        rules = await self.transport.fetch_enabled_periodic_tasks()
        tasks = await self.transport.fetch_all_tasks()
        eligible = filter_tasks(tasks, rules)

        self._periodic_tasks = tuple(rules)
        self._tasks = tuple(eligible)
        self._logger.debug(
            "snapshot refreshed: %d tasks (%d hidden by periodic rules)",
            len(eligible),
            len(tasks) - len(eligible),
        )
        self._notify()
        return list(eligible)

    # -- fetching -------------------------------------------------------

    async def fetch_all(self) -> list[Task]:
        """Re-derive the snapshot from the backend.

        Raises:
            TransportError: If a backend command fails; the snapshot is kept
        """
        async with self._lock:
            return await self._refresh()

    async def handle_change_signal(self, payload: Any = None) -> list[Task]:
        """Resync after another process announced a change.

        The payload is never trusted; a full fetch is always performed.
        """
        self._logger.debug("change signal received, resyncing")
        return await self.fetch_all()

    def listen(self, subscribe: SubscribeFn, event: str = TASK_CHANGED_EVENT) -> Callable[[], None]:
        """Bind :meth:`handle_change_signal` to a change channel.

        Args:
            subscribe: Registers a handler for an event name and returns
                the function that unregisters it
            event: Channel name

        Returns:
            The unsubscribe callable handed back by *subscribe*
        """
        return subscribe(event, self.handle_change_signal)

    # -- mutations ------------------------------------------------------

    def _merge(self, task_id: str, task_data: TaskData) -> TaskData:
        current = self._require(task_id)
        updates = {
            field: getattr(current, field)
            for field in _MERGED_FIELDS
            if field not in task_data.model_fields_set
        }
        if "parent_id" not in task_data.model_fields_set:
            parent = find_parent(task_id, self._tasks)
            if parent is not None:
                updates["parent_id"] = parent.id
        return task_data.model_copy(update=updates)

    async def create(self, task_data: TaskData) -> Task:
        """Create a task and return it as seen after a full refresh.

        Raises:
            TransportError: If a backend command fails
            NotFoundError: If the new task is missing from the refreshed snapshot
        """
        async with self._lock:
            task_id = await self.transport.create_task(task_data)
            await self._refresh()
            task = self._find(task_id)
            if task is None:
                raise NotFoundError(task_id, f"Created task {task_id} is missing after refresh")
            self._logger.info("task created: %s", task_id)
            return task

    async def update(self, task_id: str, task_data: TaskData) -> Task:
        """Update a task, keeping fields the caller did not set.

        Raises:
            NotFoundError: If the task is unknown, before or after the refresh
            TransportError: If a backend command fails
        """
        async with self._lock:
            merged = self._merge(task_id, task_data)
            await self.transport.update_task(task_id, merged)
            await self._refresh()
            task = self._find(task_id)
            if task is None:
                raise NotFoundError(task_id, f"Updated task {task_id} is missing after refresh")
            if self._current_task is not None and self._current_task.id == task_id:
                self._current_task = task
            self._logger.info("task updated: %s", task_id)
            return task

    async def delete(self, task_id: str) -> None:
        """Delete a task and refresh; clears the focused task if it was this one."""
        async with self._lock:
            await self.transport.delete_task(task_id)
            await self._refresh()
            if self._current_task is not None and self._current_task.id == task_id:
                self._current_task = None
            self._logger.info("task deleted: %s", task_id)

    async def toggle_completion(self, task_id: str) -> None:
        """Invert a task's completion flag and patch the snapshot in place.

        This is the one mutation that skips the refetch: it touches a single
        boolean and no relational fields.

        Raises:
            NotFoundError: If the task is not in the snapshot
            TransportError: If the backend command fails; the snapshot is kept
        """
        async with self._lock:
            task = self._require(task_id)
            completed = not task.completed
            await self.transport.set_task_completion(task_id, completed)

            self._tasks = tuple(_with_completion(t, task_id, completed) for t in self._tasks)
            if self._current_task is not None:
                self._current_task = _with_completion(self._current_task, task_id, completed)
            self._logger.info("task %s marked %s", task_id, "completed" if completed else "pending")
            self._notify()

    async def bulk_update(self, task_ids: Iterable[str], task_data: TaskData) -> None:
        """Apply the same update to several tasks, then refresh once."""
        task_ids = list(task_ids)
        async with self._lock:
            payloads = [(task_id, self._merge(task_id, task_data)) for task_id in task_ids]
            await asyncio.gather(
                *(self.transport.update_task(task_id, data) for task_id, data in payloads)
            )
            await self._refresh()
            self._logger.info("bulk update applied to %d tasks", len(task_ids))

    async def bulk_delete(self, task_ids: Iterable[str]) -> None:
        """Delete several tasks, then refresh once."""
        task_ids = list(task_ids)
        async with self._lock:
            await asyncio.gather(*(self.transport.delete_task(task_id) for task_id in task_ids))
            await self._refresh()
            if self._current_task is not None and self._current_task.id in task_ids:
                self._current_task = None
            self._logger.info("bulk delete removed %d tasks", len(task_ids))

    # -- queries --------------------------------------------------------

    def get_task(self, task_id: str) -> Task | None:
        return self._find(task_id)

    def completed_tasks(self) -> list[Task]:
        return [task for task in self._tasks if task.completed]

    def pending_tasks(self) -> list[Task]:
        return [task for task in self._tasks if not task.completed]

    def filtered_tasks(self, filters: TaskFilters) -> list[Task]:
        """Root tasks matching every criterion set in *filters*."""
        result = []
        search = filters.search.lower() if filters.search else None
        for task in self._tasks:
            if filters.completed is not None and task.completed != filters.completed:
                continue
            if search and search not in task.name.lower():
                continue
            created = task.created_at.timestamp()
            if filters.created_after and created < filters.created_after.timestamp():
                continue
            if filters.created_before and created > filters.created_before.timestamp():
                continue
            result.append(task)
        return result

    def stats(self, now: datetime | None = None) -> TaskStats:
        return task_stats(self._tasks, now or datetime.now())

    def reset(self) -> None:
        """Drop the snapshot and the focused task."""
        self._tasks = ()
        self._periodic_tasks = ()
        self._current_task = None
        self._notify()


def create_repository(profile: str = "default") -> TaskRepository:
    """Build a repository talking to the configured REST backend."""
    from taskboard.adapters.rest_api import RestApiTaskTransport
    from taskboard.api.client import get_client

    return TaskRepository(RestApiTaskTransport(get_client(profile)))
