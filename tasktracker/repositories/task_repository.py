"""Task repository for data access operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from tasktracker.models.task import Task, TaskPriority, TaskStatus
from tasktracker.models.user import User

# Enum columns sort by meaning, not alphabetically
STATUS_RANK = case(
    {status.value: rank for rank, status in enumerate(TaskStatus)},
    value=Task.status,
    else_=len(TaskStatus),
)
PRIORITY_RANK = case(
    {priority.value: rank for rank, priority in enumerate(TaskPriority)},
    value=Task.priority,
    else_=len(TaskPriority),
)

SORT_COLUMNS: dict[str, Any] = {
    "title": Task.title,
    "created_at": Task.created_at,
    "status": STATUS_RANK,
    "priority": PRIORITY_RANK,
}


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskRepository:
    """Repository for task data access."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create_task(self, task_data: dict) -> Task:
        """Create a new task."""
        task = Task(**task_data)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def get_task_by_id(self, task_id: UUID) -> Task | None:
        """Get task by ID."""
        return self.db.query(Task).filter(Task.id == task_id).first()

    def build_conditions(
        self,
        user_id: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        priorities: list[str] | None = None,
        search: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> list:
        """Translate listing filters into SQL conditions, combined with AND by the caller."""
        conditions = []
        if user_id:
            conditions.append(Task.user_id == user_id)
        if status:
            conditions.append(Task.status == status)
        if priority:
            conditions.append(Task.priority == priority)
        if priorities:
            conditions.append(Task.priority.in_(priorities))
        if search:
            pattern = f"%{escape_like(search)}%"
            conditions.append(
                or_(
                    Task.title.ilike(pattern, escape="\\"),
                    Task.description.ilike(pattern, escape="\\"),
                )
            )
        if created_from:
            conditions.append(Task.created_at >= created_from)
        if created_to:
            conditions.append(Task.created_at <= created_to)
        return conditions

    def list_tasks(
        self,
        conditions: list,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        skip: int = 0,
        limit: int = 10,
        with_owner: bool = False,
    ) -> tuple[list, int]:
        """
        Get one page of tasks matching all conditions plus the unpaged total.

        With ``with_owner`` each row is a ``(Task, User)`` pair.
        """
        where = and_(*conditions) if conditions else None

        count_query = self.db.query(func.count(Task.id))
        if where is not None:
            count_query = count_query.filter(where)
        total = count_query.scalar() or 0

        if with_owner:
            query = self.db.query(Task, User).join(User, Task.user_id == User.id)
        else:
            query = self.db.query(Task)
        if where is not None:
            query = query.filter(where)

        sort_column = SORT_COLUMNS.get(sort_by, Task.created_at)
        if sort_order == "asc":
            query = query.order_by(sort_column.asc(), Task.id.asc())
        else:
            query = query.order_by(sort_column.desc(), Task.id.desc())

        return query.offset(skip).limit(limit).all(), total

    def update_task(self, task_id: UUID, task_data: dict) -> Task | None:
        """
        Apply a partial update and read the row back.

        Returns None when the row vanished before the update landed.
        """
        updated = (
            self.db.query(Task)
            .filter(Task.id == task_id)
            .update(task_data, synchronize_session="fetch")
        )
        if not updated:
            self.db.rollback()
            return None
        self.db.commit()
        return self.get_task_by_id(task_id)

    def delete_task(self, task_id: UUID) -> bool:
        """Delete a task. Returns False when no row was deleted."""
        deleted = (
            self.db.query(Task)
            .filter(Task.id == task_id)
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return deleted > 0
