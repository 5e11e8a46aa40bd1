"""Periodic task rule API endpoints."""

from typing import Any

from taskboard.api.client import APIClient


class PeriodicTasksAPI:
    """Periodic rules API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_periodic_tasks(self, *, enabled: bool | None = None) -> Any:
        """List periodic rules, optionally only the enabled ones."""
        params: dict[str, Any] = {}
        if enabled is not None:
            params["enabled"] = str(enabled).lower()
        response = await self.client.get("/periodic-tasks", params=params)
        return response.json()
