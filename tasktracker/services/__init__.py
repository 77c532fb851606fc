"""Services for business logic."""

from tasktracker.services.auth_service import AuthService
from tasktracker.services.task_service import TaskService
from tasktracker.services.user_service import UserService

__all__ = [
    "AuthService",
    "TaskService",
    "UserService",
]
