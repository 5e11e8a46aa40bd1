"""Helpers shared by the view and task commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from taskboard.services.task_repository import TaskRepository, create_repository


@asynccontextmanager
async def loaded_repository(profile: str = "default") -> AsyncIterator[TaskRepository]:
    """Yield a repository whose snapshot has just been fetched."""
    repository = create_repository(profile)
    try:
        await repository.fetch_all()
        yield repository
    finally:
        await repository.transport.close()
