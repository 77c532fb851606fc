"""Tasks router for the caller's own tasks."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from tasktracker.core.auth.dependencies import AuthenticatedUser
from tasktracker.schemas.common import PaginationMeta, StandardListResponse, StandardResponse
from tasktracker.schemas.task import (
    TaskCreate,
    TaskDeleteResponse,
    TaskListQuery,
    TaskResponse,
    TaskUpdate,
)
from tasktracker.services.task_service import TaskPage, TaskService

router = APIRouter()


def page_meta(page: TaskPage) -> PaginationMeta:
    """Pagination metadata for a listing page."""
    return PaginationMeta(
        total=page.total,
        page=page.page,
        limit=page.limit,
        total_pages=page.total_pages,
        has_more=page.has_more,
    )


@router.post(
    "",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    description="Create a task owned by the caller. Status always starts as pending.",
)
async def create_task(
    task_data: TaskCreate,
    context: AuthenticatedUser,
) -> StandardResponse[TaskResponse]:
    """Create a new task."""
    task = TaskService(context.db).create_task(
        owner=context.user,
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
    )
    return StandardResponse(data=TaskResponse.model_validate(task))


@router.get(
    "",
    response_model=StandardListResponse[TaskResponse],
    status_code=status.HTTP_200_OK,
    summary="List tasks",
    description="List the caller's tasks with filters, sorting and pagination.",
)
async def list_tasks(
    context: AuthenticatedUser,
    query: Annotated[TaskListQuery, Query()],
) -> StandardListResponse[TaskResponse]:
    """List tasks owned by the caller."""
    page = TaskService(context.db).list_tasks(context.user, query)
    return StandardListResponse(data=page.items, meta=page_meta(page))


@router.get(
    "/{task_id}",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_200_OK,
    summary="Get task",
    description="Get a task the caller owns, or any task for admins.",
)
async def get_task(
    context: AuthenticatedUser,
    task_id: Annotated[UUID, Path(description="Task ID")],
) -> StandardResponse[TaskResponse]:
    """Get a specific task."""
    task = TaskService(context.db).get_authorized_task(context.user, task_id)
    return StandardResponse(data=TaskResponse.model_validate(task))


@router.patch(
    "/{task_id}",
    response_model=StandardResponse[TaskResponse],
    status_code=status.HTTP_200_OK,
    summary="Update task",
    description="Partially update a task. Owner or admin only.",
)
async def update_task(
    task_data: TaskUpdate,
    context: AuthenticatedUser,
    task_id: Annotated[UUID, Path(description="Task ID")],
) -> StandardResponse[TaskResponse]:
    """Update a task."""
    task = TaskService(context.db).update_task(context.user, task_id, task_data.changes())
    return StandardResponse(data=TaskResponse.model_validate(task))


@router.delete(
    "/{task_id}",
    response_model=StandardResponse[TaskDeleteResponse],
    status_code=status.HTTP_200_OK,
    summary="Delete task",
    description="Delete a task. Owner or admin only. Returns the deleted row.",
)
async def delete_task(
    context: AuthenticatedUser,
    task_id: Annotated[UUID, Path(description="Task ID")],
) -> StandardResponse[TaskDeleteResponse]:
    """Delete a task."""
    snapshot = TaskService(context.db).delete_task(context.user, task_id)
    return StandardResponse(data=TaskDeleteResponse(deleted_task=snapshot))
