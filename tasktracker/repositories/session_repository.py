"""Session repository for data access operations."""

from datetime import datetime

from sqlalchemy.orm import Session, joinedload

from tasktracker.models.session import UserSession


class SessionRepository:
    """Repository for login session data access."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def create(self, session_id: str, user_id: str, expires_at: datetime) -> UserSession:
        """Create a new session row."""
        session = UserSession(id=session_id, user_id=user_id, expires_at=expires_at)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_with_user(self, session_id: str) -> UserSession | None:
        """Get a session together with its owning user in one round trip."""
        return (
            self.db.query(UserSession)
            .options(joinedload(UserSession.user))
            .filter(UserSession.id == session_id)
            .first()
        )

    def rotate(self, session: UserSession, new_session_id: str, expires_at: datetime) -> UserSession:
        """Replace a session with a new id and expiry in a single commit."""
        replacement = UserSession(
            id=new_session_id, user_id=session.user_id, expires_at=expires_at
        )
        self.db.add(replacement)
        self.db.delete(session)
        self.db.commit()
        self.db.refresh(replacement)
        return replacement

    def delete(self, session_id: str) -> bool:
        """Delete a session by id. Returns False when no row existed."""
        count = (
            self.db.query(UserSession)
            .filter(UserSession.id == session_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count > 0

    def delete_all_for_user(self, user_id: str) -> int:
        """Delete every session belonging to a user."""
        count = (
            self.db.query(UserSession)
            .filter(UserSession.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose expiry is at or before ``now`` (cleanup operation)."""
        count = (
            self.db.query(UserSession)
            .filter(UserSession.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def delete_all(self) -> int:
        """Delete every session (forces all users to log in again)."""
        count = self.db.query(UserSession).delete(synchronize_session=False)
        self.db.commit()
        return count
