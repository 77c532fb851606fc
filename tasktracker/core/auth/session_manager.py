"""Session lifecycle: create, validate (with rotation), invalidate.

The session manager is the only component that writes session rows. Validation
fails soft: a missing, unknown or expired token, or a token whose user is gone,
resolves to an anonymous result. Store failures are raised as
``SessionStoreError`` so they are never mistaken for "not logged in".
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.core.auth.cookies import (
    SessionCookie,
    create_blank_session_cookie,
    create_session_cookie,
)
from tasktracker.core.config import Settings, get_settings
from tasktracker.core.exceptions import SessionStoreError
from tasktracker.core.logging import log_session_rotated, mask_token
from tasktracker.models.user import User, UserRole
from tasktracker.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)

# 30 random bytes -> 40 url-safe characters
SESSION_ID_BYTES = 30


def generate_session_id() -> str:
    """Generate an unguessable session id."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True)
class AuthUser:
    """Resolved identity of the caller. Never carries the password hash."""

    id: str
    email: str
    name: str | None
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_model(cls, user: User) -> "AuthUser":
        return cls(id=user.id, email=user.email, name=user.name, role=UserRole(user.role))


@dataclass(frozen=True)
class AuthSession:
    """A validated session. ``fresh`` is set when the id was just issued by rotation."""

    id: str
    user_id: str
    expires_at: datetime
    fresh: bool = False


@dataclass(frozen=True)
class SessionValidationResult:
    user: AuthUser | None
    session: AuthSession | None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.session is not None


ANONYMOUS = SessionValidationResult(user=None, session=None)


class SessionManager:
    """Owns the session lifecycle for one database session (one request)."""

    def __init__(self, db: Session, settings: Settings | None = None):
        """Initialize manager with database session and settings."""
        self.db = db
        self.settings = settings or get_settings()
        self.session_repository = SessionRepository(db)

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.settings.SESSION_EXPIRE_DAYS)

    @property
    def renewal_window(self) -> timedelta:
        """Remaining lifetime below which a valid session is rotated."""
        return self.session_ttl * self.settings.SESSION_RENEWAL_FRACTION

    def create_session(self, user_id: str) -> AuthSession:
        """
        Create and persist a new session for a user.

        Args:
            user_id: Owning user id.

        Returns:
            The new session (``fresh`` is True: the client must store it).

        Raises:
            SessionStoreError: If the session row could not be written.
        """
        session_id = generate_session_id()
        expires_at = utcnow() + self.session_ttl
        try:
            self.session_repository.create(session_id, user_id, expires_at)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to create session for user_id=%s", user_id, exc_info=True)
            raise SessionStoreError("Failed to create session") from exc

        return AuthSession(id=session_id, user_id=user_id, expires_at=expires_at, fresh=True)

    def validate_session(self, session_id: str | None) -> SessionValidationResult:
        """
        Resolve a session token into the caller's identity.

        Expired rows are deleted on sight. A valid session whose remaining
        lifetime is inside the renewal window is replaced by a new id with a
        full TTL; the returned session then has ``fresh=True`` and the old id
        stops working.

        Args:
            session_id: Token read from the client, or None.

        Returns:
            ``SessionValidationResult`` with both fields set, or both None.

        Raises:
            SessionStoreError: If the store could not be queried or written.
        """
        if not session_id:
            return ANONYMOUS

        try:
            stored = self.session_repository.get_with_user(session_id)
            if stored is None:
                return ANONYMOUS

            now = utcnow()
            expires_at = as_utc(stored.expires_at)
            if expires_at <= now:
                logger.debug("Session %s expired at %s", mask_token(session_id), expires_at)
                self.session_repository.delete(session_id)
                return ANONYMOUS

            if stored.user is None:
                return ANONYMOUS
            # Snapshot before any commit expires the ORM instance
            identity = AuthUser.from_model(stored.user)

            fresh = False
            if expires_at - now < self.renewal_window:
                new_session_id = generate_session_id()
                expires_at = now + self.session_ttl
                self.session_repository.rotate(stored, new_session_id, expires_at)
                log_session_rotated(identity.id, session_id, new_session_id)
                session_id = new_session_id
                fresh = True
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Session store failure during validation", exc_info=True)
            raise SessionStoreError("Failed to validate session") from exc

        return SessionValidationResult(
            user=identity,
            session=AuthSession(
                id=session_id, user_id=identity.id, expires_at=expires_at, fresh=fresh
            ),
        )

    def invalidate_session(self, session_id: str) -> None:
        """
        Delete a session. Unknown or already-deleted ids are a no-op.

        Raises:
            SessionStoreError: If the store could not be written.
        """
        try:
            self.session_repository.delete(session_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to invalidate session", exc_info=True)
            raise SessionStoreError("Failed to invalidate session") from exc

    def invalidate_user_sessions(self, user_id: str) -> int:
        """Delete every session of a user (log out everywhere)."""
        try:
            return self.session_repository.delete_all_for_user(user_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise SessionStoreError("Failed to invalidate user sessions") from exc

    def delete_expired_sessions(self) -> int:
        """Remove expired session rows. Returns the number removed."""
        try:
            return self.session_repository.delete_expired(utcnow())
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise SessionStoreError("Failed to delete expired sessions") from exc

    def create_session_cookie(self, session_id: str) -> SessionCookie:
        return create_session_cookie(session_id, self.settings)

    def create_blank_session_cookie(self) -> SessionCookie:
        return create_blank_session_cookie(self.settings)
