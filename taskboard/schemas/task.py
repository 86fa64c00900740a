from datetime import datetime
from typing import List, Optional

from taskboard.schemas.base import CamelModel, PaginationMeta
from taskboard.schemas.user import ProfileResponse

class TaskCreate(CamelModel):
    title: Optional[str] = None
    assigned_to_id: Optional[int] = None

class TaskUpdate(CamelModel):
    title: Optional[str] = None
    assigned_to_id: Optional[int] = None
    done: Optional[bool] = None

class AssigneeResponse(CamelModel):
    id: int
    email: str
    profile: Optional[ProfileResponse] = None

class TaskResponse(CamelModel):
    id: int
    title: str
    done: bool
    created_at: datetime
    assigned_to_id: Optional[int] = None
    assigned_to: Optional[AssigneeResponse] = None

class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]
    pagination: PaginationMeta
