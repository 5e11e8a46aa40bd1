"""Tasks API endpoints."""

from typing import Any

from taskboard.api.client import APIClient


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self) -> Any:
        """List all tasks with their children attached."""
        response = await self.client.get("/tasks")
        return response.json()

    async def create_task(self, data: dict[str, Any]) -> Any:
        """Create a new task; the backend answers with the new id."""
        response = await self.client.post("/tasks", json=data)
        return response.json()

    async def update_task(self, task_id: str, data: dict[str, Any]) -> dict:
        """Replace a task's editable fields."""
        response = await self.client.put(f"/tasks/{task_id}", json=data)
        return response.json()

    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")

    async def update_task_status(self, task_id: str, completed: bool) -> dict:
        """Set the completion flag of a task."""
        response = await self.client.patch(
            f"/tasks/{task_id}/status",
            json={"completed": completed},
        )
        return response.json()
