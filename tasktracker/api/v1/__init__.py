"""API v1 router aggregation."""

from fastapi import APIRouter

from tasktracker.api.v1 import admin, auth, tasks
from tasktracker.schemas.common import ErrorResponse

api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Validation or request error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    tasks.router,
    prefix="/tasks",
    tags=["tasks"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the owner or an admin"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin role required"},
    },
)
