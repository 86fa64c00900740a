from typing import Any, Dict, Optional

from taskboard.clients.session_client import SessionClient
from taskboard.schemas.task import TaskListResponse, TaskResponse
from taskboard.schemas.user import UserListResponse


class TaskboardClient:
    """Typed task and user calls on top of an authenticated SessionClient."""

    def __init__(self, session: SessionClient):
        self.session = session
        self.prefix = session.api_prefix

    async def list_tasks(self, page: int = 1, limit: int = 10) -> TaskListResponse:
        response = await self.session.get(f"{self.prefix}/tasks", params={"page": page, "limit": limit})
        response.raise_for_status()
        return TaskListResponse.model_validate(response.json())

    async def create_task(self, title: str, assigned_to_id: Optional[int] = None) -> TaskResponse:
        body: Dict[str, Any] = {"title": title}
        if assigned_to_id is not None:
            body["assignedToId"] = assigned_to_id
        response = await self.session.post(f"{self.prefix}/tasks", json=body)
        response.raise_for_status()
        return TaskResponse.model_validate(response.json())

    async def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        assigned_to_id: Optional[int] = None,
        done: Optional[bool] = None,
    ) -> TaskResponse:
        body: Dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if assigned_to_id is not None:
            body["assignedToId"] = assigned_to_id
        if done is not None:
            body["done"] = done
        response = await self.session.put(f"{self.prefix}/tasks/{task_id}", json=body)
        response.raise_for_status()
        return TaskResponse.model_validate(response.json())

    async def delete_task(self, task_id: int) -> None:
        response = await self.session.delete(f"{self.prefix}/tasks/{task_id}")
        response.raise_for_status()

    async def list_users(self, page: int = 1, limit: int = 10) -> UserListResponse:
        response = await self.session.get(f"{self.prefix}/users", params={"page": page, "limit": limit})
        response.raise_for_status()
        return UserListResponse.model_validate(response.json())
