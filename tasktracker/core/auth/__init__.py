"""Authentication and authorization core module."""

from tasktracker.core.auth.cookies import (
    SessionCookie,
    create_blank_session_cookie,
    create_session_cookie,
)
from tasktracker.core.auth.password import hash_password, verify_password
from tasktracker.core.auth.permissions import is_owner_or_admin
from tasktracker.core.auth.session_manager import (
    AuthSession,
    AuthUser,
    SessionManager,
    SessionValidationResult,
)

__all__ = [
    "AuthSession",
    "AuthUser",
    "SessionCookie",
    "SessionManager",
    "SessionValidationResult",
    "create_blank_session_cookie",
    "create_session_cookie",
    "hash_password",
    "is_owner_or_admin",
    "verify_password",
]
