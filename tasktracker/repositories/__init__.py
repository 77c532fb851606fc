"""Repositories for data access operations."""

from tasktracker.repositories.session_repository import SessionRepository
from tasktracker.repositories.task_repository import TaskRepository
from tasktracker.repositories.user_repository import UserRepository

__all__ = [
    "SessionRepository",
    "TaskRepository",
    "UserRepository",
]
