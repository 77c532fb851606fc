from tasktracker.core.db.session import Base
from tasktracker.models.session import UserSession
from tasktracker.models.task import Task, TaskPriority, TaskStatus
from tasktracker.models.user import User, UserRole

__all__ = [
    "Base",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
    "UserRole",
    "UserSession",
]
