"""Task service: ownership-gated task procedures."""

import logging
import math
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from tasktracker.core.auth.permissions import is_owner_or_admin
from tasktracker.core.auth.session_manager import AuthUser
from tasktracker.core.exceptions import raise_bad_request, raise_forbidden, raise_not_found
from tasktracker.core.logging import log_access_denied
from tasktracker.models.task import Task, TaskPriority, TaskStatus
from tasktracker.repositories import TaskRepository
from tasktracker.schemas.task import (
    AdminTaskListQuery,
    TaskListQuery,
    TaskOwner,
    TaskResponse,
    TaskWithOwnerResponse,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskPage:
    """One page of a listing plus the unpaged total."""

    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total


class TaskService:
    """Service for task management."""

    def __init__(self, db: Session):
        """Initialize task service.

        Args:
            db: Database session
        """
        self.db = db
        self.repository = TaskRepository(db)

    def create_task(
        self,
        owner: AuthUser,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        """Create a task owned by the caller; status always starts as pending."""
        task = self.repository.create_task(
            {
                "title": title,
                "description": description,
                "priority": priority.value,
                "status": TaskStatus.PENDING.value,
                "user_id": owner.id,
            }
        )
        logger.info("Task created - task_id=%s, user_id=%s", task.id, owner.id)
        return task

    def _conditions(self, query: TaskListQuery, user_id: str | None) -> list:
        return self.repository.build_conditions(
            user_id=user_id,
            status=query.status.value if query.status else None,
            priority=query.priority.value if query.priority else None,
            priorities=[p.value for p in query.priorities] if query.priorities else None,
            search=query.search,
            created_from=query.created_from,
            created_to=query.created_to,
        )

    def list_tasks(self, owner: AuthUser, query: TaskListQuery) -> TaskPage:
        """List the caller's own tasks. Ownership is always applied, for admins too."""
        rows, total = self.repository.list_tasks(
            self._conditions(query, owner.id),
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            skip=query.offset,
            limit=query.limit,
        )
        return TaskPage(
            items=[TaskResponse.model_validate(task) for task in rows],
            total=total,
            page=query.page,
            limit=query.limit,
        )

    def list_all_tasks(self, query: AdminTaskListQuery) -> TaskPage:
        """List tasks across users with owner identity attached (admin only, guarded by caller)."""
        rows, total = self.repository.list_tasks(
            self._conditions(query, query.user_id),
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            skip=query.offset,
            limit=query.limit,
            with_owner=True,
        )
        items = [
            TaskWithOwnerResponse(
                **TaskResponse.model_validate(task).model_dump(),
                owner=TaskOwner.model_validate(owner),
            )
            for task, owner in rows
        ]
        return TaskPage(items=items, total=total, page=query.page, limit=query.limit)

    def get_authorized_task(self, actor: AuthUser, task_id: UUID) -> Task:
        """
        Fetch the current row and apply the ownership-or-admin rule to it.

        Raises:
            APIException: 404 TASK_NOT_FOUND, 403 AUTH_FORBIDDEN.
        """
        task = self.repository.get_task_by_id(task_id)
        if task is None:
            raise_not_found("Task", str(task_id))
        if not is_owner_or_admin(actor, task.user_id):
            log_access_denied(actor.id, "not_owner", f"task:{task_id}")
            raise_forbidden(message="You can only modify your own tasks")
        return task

    def update_task(self, actor: AuthUser, task_id: UUID, changes: dict) -> Task:
        """
        Apply a partial update to a task the caller owns (or any task, for admins).

        Args:
            actor: Caller identity.
            task_id: Task ID.
            changes: Column values to set; only supplied fields.

        Returns:
            The task as stored after the update.

        Raises:
            APIException: 400 VALIDATION_ERROR for an empty update,
                404 TASK_NOT_FOUND (also when the row disappears mid-update),
                403 AUTH_FORBIDDEN.
        """
        if not changes:
            raise_bad_request(code="VALIDATION_ERROR", message="No update data provided")

        self.get_authorized_task(actor, task_id)

        task = self.repository.update_task(task_id, changes)
        if task is None:
            raise_not_found("Task", str(task_id))
        logger.info(
            "Task updated - task_id=%s, user_id=%s, fields=%s",
            task_id,
            actor.id,
            sorted(changes),
        )
        return task

    def delete_task(self, actor: AuthUser, task_id: UUID) -> TaskResponse:
        """
        Delete a task the caller owns (or any task, for admins).

        Returns:
            Snapshot of the row as it was before deletion.

        Raises:
            APIException: 404 TASK_NOT_FOUND, 403 AUTH_FORBIDDEN.
        """
        task = self.get_authorized_task(actor, task_id)
        snapshot = TaskResponse.model_validate(task)

        if not self.repository.delete_task(task_id):
            raise_not_found("Task", str(task_id))
        logger.info("Task deleted - task_id=%s, user_id=%s", task_id, actor.id)
        return snapshot
