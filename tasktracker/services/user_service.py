"""User service for administrative user operations."""

from sqlalchemy.orm import Session

from tasktracker.core.auth.password import hash_password
from tasktracker.models.user import User, UserRole, generate_user_id, normalize_email
from tasktracker.repositories import UserRepository


class UserService:
    """Service for user management."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.db = db
        self.repository = UserRepository(db)

    def list_users(self) -> list[User]:
        """All users, oldest first."""
        return self.repository.get_all()

    def ensure_admin(self, email: str, password: str, name: str | None = None) -> tuple[User, bool]:
        """
        Create an admin account, or promote the existing account with this email.

        The password is only set when the account is created.

        Returns:
            (user, created) tuple.
        """
        user = self.repository.get_by_email(email)
        if user is None:
            user = self.repository.create(
                {
                    "id": generate_user_id(),
                    "email": normalize_email(email),
                    "hashed_password": hash_password(password),
                    "name": name,
                    "role": UserRole.ADMIN.value,
                }
            )
            return user, True

        if user.role != UserRole.ADMIN.value:
            user = self.repository.update(user, {"role": UserRole.ADMIN.value})
        return user, False
