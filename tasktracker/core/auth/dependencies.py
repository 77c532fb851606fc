"""FastAPI dependencies for authentication and authorization.

Guards compose in order: ``get_request_context`` resolves the session once per
request (FastAPI caches a dependency for the lifetime of the request),
``require_authenticated`` narrows it, ``require_admin`` narrows it further.
Guards only inspect the resolved context; they never query the store.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from tasktracker.core.auth.cookies import SessionCookie
from tasktracker.core.auth.session_manager import AuthSession, AuthUser, SessionManager
from tasktracker.core.config import get_settings
from tasktracker.core.db.deps import get_db
from tasktracker.core.exceptions import raise_forbidden, raise_unauthorized
from tasktracker.core.logging import log_access_denied


@dataclass(frozen=True)
class RequestContext:
    """Per-request context; identity fields are None for anonymous callers."""

    db: Session
    user: AuthUser | None
    session: AuthSession | None


@dataclass(frozen=True)
class AuthenticatedContext:
    """Request context with a resolved identity."""

    db: Session
    user: AuthUser
    session: AuthSession


def read_session_token(request: Request) -> str | None:
    """Read the session token from the request cookies."""
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME) or None


async def get_request_context(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> RequestContext:
    """
    Build the base request context from the inbound session cookie.

    Attached to every request regardless of outcome. When validation rotated
    the session the new cookie is set on the response; when a token was sent
    but did not resolve, a blank cookie clears it on the client. The cookie is
    also kept on ``request.state`` so error responses carry it too: the
    rotation is already committed, and a client left with the old id would
    be logged out by a 403 or 404.

    Args:
        request: FastAPI request object (for cookies).
        response: FastAPI response object (for Set-Cookie).
        db: Database session.

    Returns:
        RequestContext with ``user``/``session`` resolved or None.

    Raises:
        SessionStoreError: If the session store is unreachable.
    """
    token = read_session_token(request)
    manager = SessionManager(db)
    result = manager.validate_session(token)

    cookie: SessionCookie | None = None
    if result.session is not None and result.session.fresh:
        cookie = manager.create_session_cookie(result.session.id)
    elif token and result.session is None:
        cookie = manager.create_blank_session_cookie()

    if cookie is not None:
        cookie.apply(response)
        # Error handlers build their own response; they re-apply it from here
        request.state.session_cookie = cookie

    return RequestContext(db=db, user=result.user, session=result.session)


def pending_session_cookie(request: Request) -> SessionCookie | None:
    """Cookie issued by ``get_request_context`` for this request, if any."""
    return getattr(request.state, "session_cookie", None)


async def require_authenticated(
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> AuthenticatedContext:
    """
    Require a resolved identity.

    Raises:
        HTTPException: 401 AUTH_UNAUTHORIZED when no session resolved.
    """
    if context.user is None or context.session is None:
        raise_unauthorized()
    return AuthenticatedContext(db=context.db, user=context.user, session=context.session)


async def require_admin(
    context: Annotated[AuthenticatedContext, Depends(require_authenticated)],
) -> AuthenticatedContext:
    """
    Require the admin role on top of authentication.

    Raises:
        HTTPException: 403 AUTH_FORBIDDEN when the caller is not an admin.
    """
    if not context.user.is_admin:
        log_access_denied(context.user.id, "not_admin")
        raise_forbidden(message="Admin privileges required")
    return context


CurrentContext = Annotated[RequestContext, Depends(get_request_context)]
AuthenticatedUser = Annotated[AuthenticatedContext, Depends(require_authenticated)]
AdminUser = Annotated[AuthenticatedContext, Depends(require_admin)]
