"""Ownership and role checks shared by the task procedures."""

from tasktracker.core.auth.session_manager import AuthUser


def is_owner_or_admin(user: AuthUser, owner_id: str) -> bool:
    """
    Check the ownership-or-admin rule.

    Args:
        user: Resolved caller identity.
        owner_id: User id stored on the resource row.

    Returns:
        True if the caller owns the resource or holds the admin role.
    """
    return user.id == owner_id or user.is_admin
