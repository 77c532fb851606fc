"""Structured logging configuration for security and application events."""

import logging
import sys

from tasktracker.core.config import get_settings

settings = get_settings()

# Create logger for security events
security_logger = logging.getLogger("tasktracker.security")
security_logger.setLevel(logging.INFO)

# Create logger for application events
app_logger = logging.getLogger("tasktracker")
app_logger.setLevel(settings.LOG_LEVEL.upper())

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
console_handler.setFormatter(
    logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
)

# The security logger propagates to the app logger, so one handler is enough
if not app_logger.handlers:
    app_logger.addHandler(console_handler)


def mask_email(email: str) -> str:
    """
    Mask email address for logging (show only first 3 chars and domain).

    Args:
        email: Email address to mask.

    Returns:
        Masked email string (e.g., "tes***@example.com").
    """
    if not email or "@" not in email:
        return "***"

    local_part, domain = email.split("@", 1)
    if len(local_part) <= 3:
        masked_local = "*" * len(local_part)
    else:
        masked_local = local_part[:3] + "***"

    return f"{masked_local}@{domain}"


def mask_token(token: str | None) -> str:
    """Show only the first 6 characters of a session token."""
    if not token:
        return "-"
    return token[:6] + "..."


def _with_ip(message: str, ip_address: str | None) -> str:
    return message + (f", ip={ip_address}" if ip_address else "")


def log_auth_success(user_id: str, email: str, role: str, ip_address: str | None = None) -> None:
    """
    Log successful authentication.

    Args:
        user_id: User ID.
        email: User email (will be masked).
        role: Role stored on the user record.
        ip_address: Client IP address (optional).
    """
    security_logger.info(
        _with_ip(
            f"Authentication successful - user_id={user_id}, email={mask_email(email)}, role={role}",
            ip_address,
        )
    )


def log_auth_failure(email: str, reason: str, ip_address: str | None = None) -> None:
    """
    Log failed authentication attempt.

    Args:
        email: User email (will be masked).
        reason: Reason for failure (generic, doesn't reveal if user exists).
        ip_address: Client IP address (optional).
    """
    security_logger.warning(
        _with_ip(
            f"Authentication failed - email={mask_email(email)}, reason={reason}",
            ip_address,
        )
    )


def log_signup(user_id: str, email: str, role: str, ip_address: str | None = None) -> None:
    """Log account creation."""
    security_logger.info(
        _with_ip(
            f"User signed up - user_id={user_id}, email={mask_email(email)}, role={role}",
            ip_address,
        )
    )


def log_logout(user_id: str | None, ip_address: str | None = None) -> None:
    """
    Log user logout.

    Args:
        user_id: User ID, when the session was still resolvable.
        ip_address: Client IP address (optional).
    """
    security_logger.info(_with_ip(f"User logged out - user_id={user_id or 'unknown'}", ip_address))


def log_session_rotated(user_id: str, old_session_id: str, new_session_id: str) -> None:
    """Log a session id rotation."""
    security_logger.info(
        f"Session rotated - user_id={user_id}, "
        f"old={mask_token(old_session_id)}, new={mask_token(new_session_id)}"
    )


def log_access_denied(user_id: str | None, reason: str, resource: str | None = None) -> None:
    """
    Log a rejected authorization decision.

    Args:
        user_id: Caller ID (None for anonymous callers).
        reason: Short machine-readable reason (e.g. "not_admin", "not_owner").
        resource: Optional resource identifier.
    """
    message = f"Access denied - user_id={user_id or 'anonymous'}, reason={reason}"
    if resource:
        message += f", resource={resource}"
    security_logger.warning(message)
