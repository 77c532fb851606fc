"""Pydantic schemas for API requests and responses."""

from tasktracker.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SessionInfo,
    SessionUser,
    SessionValidationResponse,
    SignupRequest,
)
from tasktracker.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    MessageResponse,
    PaginationMeta,
    StandardListResponse,
    StandardResponse,
)
from tasktracker.schemas.task import (
    AdminTaskListQuery,
    TaskCreate,
    TaskDeleteResponse,
    TaskListQuery,
    TaskOwner,
    TaskResponse,
    TaskUpdate,
    TaskWithOwnerResponse,
)
from tasktracker.schemas.user import UserResponse

__all__ = [
    # Auth
    "SignupRequest",
    "LoginRequest",
    "LoginResponse",
    "SessionUser",
    "SessionInfo",
    "SessionValidationResponse",
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "PaginationMeta",
    "StandardListResponse",
    "StandardResponse",
    # Task
    "AdminTaskListQuery",
    "TaskCreate",
    "TaskDeleteResponse",
    "TaskListQuery",
    "TaskOwner",
    "TaskResponse",
    "TaskUpdate",
    "TaskWithOwnerResponse",
    # User
    "UserResponse",
]
