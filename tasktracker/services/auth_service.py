"""Authentication service for signup, login, and logout."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.core.auth.password import hash_password, verify_dummy_password, verify_password
from tasktracker.core.auth.route_access import ADMIN_HOME_PATH, HOME_PATH
from tasktracker.core.auth.session_manager import AuthSession, AuthUser, SessionManager
from tasktracker.core.config import get_settings
from tasktracker.core.exceptions import SessionStoreError, raise_bad_request, raise_forbidden
from tasktracker.core.logging import log_auth_failure, log_auth_success, log_signup
from tasktracker.models.user import User, UserRole, generate_user_id, normalize_email
from tasktracker.repositories import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


@dataclass(frozen=True)
class LoginResult:
    user: AuthUser
    session: AuthSession
    redirect_to: str


@dataclass(frozen=True)
class SignupResult:
    user: AuthUser
    session: AuthSession


def redirect_target(role: UserRole, selected_role: UserRole | None) -> str:
    """Pick the landing page: the stored role decides unless the caller asked for the user view."""
    if role == UserRole.ADMIN and selected_role != UserRole.USER:
        return ADMIN_HOME_PATH
    return HOME_PATH


class AuthService:
    """Service for authentication business logic."""

    def __init__(self, db: Session, session_manager: SessionManager | None = None):
        """Initialize service with database session."""
        self.db = db
        self.user_repository = UserRepository(db)
        self.session_manager = session_manager or SessionManager(db)
        self.settings = get_settings()

    def authenticate_user(self, email: str, password: str) -> User | None:
        """
        Authenticate a user with email and password.

        Security: Does not reveal if the user exists.
        Returns None for both invalid credentials and non-existent users.

        Args:
            email: User email address (normalized before lookup).
            password: Plain text password.

        Returns:
            User object if authentication succeeds, None otherwise.
        """
        user = self.user_repository.get_by_email(email)

        if user is None:
            # Dummy verification to prevent timing attacks
            verify_dummy_password(password)
            return None

        if verify_password(password, user.hashed_password):
            return user
        return None

    def signup(
        self,
        email: str,
        password: str,
        name: str | None = None,
        role: UserRole = UserRole.USER,
        ip_address: str | None = None,
    ) -> SignupResult:
        """
        Create an account and log it in.

        Args:
            email: Email address (normalized here).
            password: Plain text password.
            name: Optional display name.
            role: Requested role.
            ip_address: Client IP address for the security log.

        Returns:
            SignupResult with the new identity and its first session.

        Raises:
            APIException: 400 AUTH_EMAIL_TAKEN when the email is registered,
                403 AUTH_FORBIDDEN when admin self-registration is disabled.
            SessionStoreError: If the first session could not be created; the
                new account is removed again so the signup can be retried.
        """
        normalized_email = normalize_email(email)

        if role == UserRole.ADMIN and not self.settings.ALLOW_ADMIN_SIGNUP:
            raise_forbidden(message="Admin accounts cannot be self-registered")

        if self.user_repository.email_exists(normalized_email):
            raise_bad_request(code="AUTH_EMAIL_TAKEN", message="Email already registered")

        try:
            user = self.user_repository.create(
                {
                    "id": generate_user_id(),
                    "email": normalized_email,
                    "hashed_password": hash_password(password),
                    "name": name,
                    "role": role.value,
                }
            )
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            self.db.rollback()
            raise_bad_request(code="AUTH_EMAIL_TAKEN", message="Email already registered")

        identity = AuthUser.from_model(user)
        try:
            session = self.session_manager.create_session(identity.id)
        except SessionStoreError:
            # No account without a session
            self._discard_user(identity.id)
            raise
        log_signup(identity.id, identity.email, identity.role.value, ip_address)
        return SignupResult(user=identity, session=session)

    def _discard_user(self, user_id: str) -> None:
        """Remove an account whose first session could not be created."""
        try:
            self.user_repository.delete(user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to remove user_id=%s after signup failed", user_id, exc_info=True)

    def login(
        self,
        email: str,
        password: str,
        selected_role: UserRole | None = None,
        ip_address: str | None = None,
    ) -> LoginResult:
        """
        Verify credentials and open a session.

        The credential check always runs before the role check, so a role
        mismatch is only reported to someone who knows the password.

        Args:
            email: Email address.
            password: Plain text password.
            selected_role: Role the caller intends to sign in as.
            ip_address: Client IP address for the security log.

        Returns:
            LoginResult with identity, new session and redirect target.

        Raises:
            APIException: 400 AUTH_INVALID_CREDENTIALS (same for unknown email
                and wrong password), 403 AUTH_ROLE_MISMATCH for an admin login
                attempt by a non-admin.
        """
        user = self.authenticate_user(email, password)
        if user is None:
            log_auth_failure(email, "invalid_credentials", ip_address)
            raise_bad_request(code="AUTH_INVALID_CREDENTIALS", message=INVALID_CREDENTIALS_MESSAGE)

        identity = AuthUser.from_model(user)
        if selected_role == UserRole.ADMIN and not identity.is_admin:
            log_auth_failure(email, "role_mismatch", ip_address)
            raise_forbidden(code="AUTH_ROLE_MISMATCH", message="You don't have admin privileges")

        session = self.session_manager.create_session(identity.id)
        log_auth_success(identity.id, identity.email, identity.role.value, ip_address)
        return LoginResult(
            user=identity,
            session=session,
            redirect_to=redirect_target(identity.role, selected_role),
        )

    def logout(self, session_id: str | None) -> bool:
        """
        End the session identified by ``session_id``.

        Returns:
            False when there was no token (already logged out), True otherwise.
        """
        if not session_id:
            return False
        self.session_manager.invalidate_session(session_id)
        return True
