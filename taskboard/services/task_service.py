import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from taskboard.core.errors import NotFoundError, ValidationError
from taskboard.models.task import Task
from taskboard.models.user import User

logger = logging.getLogger(__name__)

class TaskService:
    @staticmethod
    def get_task(db: Session, task_id: int) -> Optional[Task]:
        """Get task by ID."""
        return db.query(Task).filter(Task.id == task_id).first()

    @staticmethod
    def count_tasks(db: Session) -> int:
        return db.query(func.count(Task.id)).scalar() or 0

    @staticmethod
    def get_tasks(db: Session, skip: int = 0, limit: int = 10) -> List[Task]:
        """Get tasks newest first; id breaks created_at ties."""
        return (
            db.query(Task)
            .options(selectinload(Task.assigned_to).selectinload(User.profile))
            .order_by(Task.created_at.desc(), Task.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def _check_assignee(db: Session, user_id: Optional[int]) -> None:
        if user_id is not None and not db.query(User.id).filter(User.id == user_id).first():
            raise ValidationError("Assigned user does not exist")

    @staticmethod
    def create_task(db: Session, title: str, assigned_to_id: Optional[int] = None) -> Task:
        TaskService._check_assignee(db, assigned_to_id)
        task = Task(title=title, assigned_to_id=assigned_to_id)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def update_task(db: Session, task_id: int, update_data: Dict[str, Any]) -> Task:
        """Apply the provided fields only."""
        task = TaskService.get_task(db, task_id)
        if not task:
            raise NotFoundError("Task not found")

        if "assigned_to_id" in update_data:
            TaskService._check_assignee(db, update_data["assigned_to_id"])
        if "title" in update_data and not (update_data["title"] or "").strip():
            raise ValidationError("Title is required")

        for field, value in update_data.items():
            setattr(task, field, value)

        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete_task(db: Session, task_id: int) -> None:
        task = TaskService.get_task(db, task_id)
        if not task:
            raise NotFoundError("Task not found")
        db.delete(task)
        db.commit()
        logger.info("Deleted task %s", task_id)
