from sqlalchemy.orm import Session

from tasktracker.models.user import User, normalize_email


class UserRepository:
    """Repository for user data access."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create(self, user_data: dict) -> User:
        """Create a new user."""
        user = User(**user_data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (normalized before lookup)."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def email_exists(self, email: str) -> bool:
        """Check whether a normalized email already has a user record."""
        return (
            self.db.query(User.id).filter(User.email == normalize_email(email)).first()
            is not None
        )

    def get_all(self) -> list[User]:
        """Get all users ordered by creation time."""
        return self.db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()

    def update(self, user: User, user_data: dict) -> User:
        """Update user data."""
        for key, value in user_data.items():
            if value is not None:
                setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: str) -> bool:
        """Delete a user by id; sessions and tasks cascade. Returns False when absent."""
        count = self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self.db.commit()
        return count > 0
