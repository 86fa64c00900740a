import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.api.deps import RequestContext, get_current_identity, get_db
from taskboard.core.errors import InternalError, ValidationError
from taskboard.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from taskboard.services.pagination import PageRequest, list_page
from taskboard.services.task_service import TaskService

logger = logging.getLogger(__name__)

# Largest id a signed 64-bit INTEGER column can hold
MAX_TASK_ID = 2**63 - 1

router = APIRouter()


@router.get("", response_model=TaskListResponse)
def read_tasks(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    context: RequestContext = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Any:
    """Get one page of tasks, newest first."""
    request = PageRequest.from_query(page, limit)
    try:
        result = list_page(
            request,
            lambda: TaskService.count_tasks(db),
            lambda skip, size: TaskService.get_tasks(db, skip, size),
        )
    except SQLAlchemyError:
        logger.exception("Listing tasks failed")
        raise InternalError("Failed to fetch tasks")

    return TaskListResponse(
        tasks=[TaskResponse.model_validate(task) for task in result.items],
        pagination=result.meta(),
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    context: RequestContext = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Any:
    """Create a task, optionally assigned to a user."""
    title = (task_in.title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    try:
        task = TaskService.create_task(db, title, task_in.assigned_to_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Creating task failed")
        raise InternalError("Failed to create task")
    logger.info("User %s created task %s", context.user_id, task.id)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_in: TaskUpdate,
    task_id: int = Path(..., le=MAX_TASK_ID),
    context: RequestContext = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Any:
    """Update the fields present in the body."""
    # null only has meaning for the assignee (unassign)
    update_data = {
        field: value
        for field, value in task_in.model_dump(exclude_unset=True).items()
        if value is not None or field == "assigned_to_id"
    }
    if update_data.get("title"):
        update_data["title"] = update_data["title"].strip()
    try:
        task = TaskService.update_task(db, task_id, update_data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Updating task %s failed", task_id)
        raise InternalError("Failed to update task")
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int = Path(..., le=MAX_TASK_ID),
    context: RequestContext = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Response:
    """Delete a task."""
    try:
        TaskService.delete_task(db, task_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Deleting task %s failed", task_id)
        raise InternalError("Failed to delete task")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
