"""Admin router: cross-user task listing and user directory."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from tasktracker.api.v1.tasks import page_meta
from tasktracker.core.auth.dependencies import AdminUser
from tasktracker.schemas.common import StandardListResponse, StandardResponse
from tasktracker.schemas.task import AdminTaskListQuery, TaskWithOwnerResponse
from tasktracker.schemas.user import UserResponse
from tasktracker.services.task_service import TaskService
from tasktracker.services.user_service import UserService

router = APIRouter()


@router.get(
    "/tasks",
    response_model=StandardListResponse[TaskWithOwnerResponse],
    status_code=status.HTTP_200_OK,
    summary="List all tasks",
    description="List tasks of every user with owner identity. Requires the admin role.",
)
async def list_all_tasks(
    context: AdminUser,
    query: Annotated[AdminTaskListQuery, Query()],
) -> StandardListResponse[TaskWithOwnerResponse]:
    """List tasks across all users."""
    page = TaskService(context.db).list_all_tasks(query)
    return StandardListResponse(data=page.items, meta=page_meta(page))


@router.get(
    "/users",
    response_model=StandardResponse[list[UserResponse]],
    status_code=status.HTTP_200_OK,
    summary="List users",
    description="List all users ordered by creation time. Requires the admin role.",
)
async def list_users(context: AdminUser) -> StandardResponse[list[UserResponse]]:
    """List users."""
    users = UserService(context.db).list_users()
    return StandardResponse(
        data=[UserResponse.model_validate(u) for u in users],
        meta={"total": len(users)},
    )
