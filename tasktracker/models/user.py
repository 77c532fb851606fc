"""User model with authentication support."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from tasktracker.core.db.session import Base


class UserRole(str, Enum):
    """Global user role."""

    USER = "user"
    ADMIN = "admin"


def generate_user_id() -> str:
    """Generate an opaque user id."""
    return str(uuid4())


def normalize_email(email: str) -> str:
    """Lowercase and trim an email address for storage and lookup."""
    return email.strip().lower()


class User(Base):
    """User model with credentials and role."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True, default=generate_user_id)
    # Always stored normalized, so the unique index is case-insensitive in practice
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tasks = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
