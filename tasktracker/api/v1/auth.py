"""Authentication router for signup, login, logout, and session validation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from tasktracker.core.auth.cookies import create_blank_session_cookie
from tasktracker.core.auth.dependencies import CurrentContext, read_session_token
from tasktracker.core.db.deps import get_db
from tasktracker.core.logging import log_logout
from tasktracker.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SessionInfo,
    SessionUser,
    SessionValidationResponse,
    SignupRequest,
)
from tasktracker.schemas.common import MessageResponse, StandardResponse
from tasktracker.services.auth_service import AuthService

router = APIRouter()


def get_client_ip(request: Request) -> str | None:
    """Best-effort client address for the security log."""
    return request.client.host if request.client else None


@router.post(
    "/signup",
    response_model=StandardResponse[MessageResponse],
    status_code=status.HTTP_200_OK,
)
async def signup(
    signup_data: SignupRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> StandardResponse[MessageResponse]:
    """
    Register a new account and log it in.

    Security:
    - Email is normalized (trimmed, lowercased) before the uniqueness check
    - Password is stored as an Argon2id hash only

    Raises:
        HTTPException: 400 if the email is already registered, 403 if admin
            self-registration is disabled.
    """
    auth_service = AuthService(db)
    result = auth_service.signup(
        email=signup_data.email,
        password=signup_data.password,
        name=signup_data.name,
        role=signup_data.role,
        ip_address=get_client_ip(request),
    )
    auth_service.session_manager.create_session_cookie(result.session.id).apply(response)

    return StandardResponse(data=MessageResponse(message="Account created successfully"))


@router.post(
    "/login",
    response_model=StandardResponse[LoginResponse],
    status_code=status.HTTP_200_OK,
)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> StandardResponse[LoginResponse]:
    """
    Authenticate user and set the session cookie.

    Security:
    - Does not reveal if user exists (generic error message)
    - Admin-role login is checked only after the password verified

    Args:
        login_data: Login credentials and optional intended role.
        request: FastAPI request object (for IP address).
        response: FastAPI response object (for Set-Cookie).
        db: Database session.

    Returns:
        LoginResponse with role and redirect target.

    Raises:
        HTTPException: 400 on invalid credentials, 403 on role mismatch.
    """
    auth_service = AuthService(db)
    result = auth_service.login(
        email=login_data.email,
        password=login_data.password,
        selected_role=login_data.selected_role,
        ip_address=get_client_ip(request),
    )
    auth_service.session_manager.create_session_cookie(result.session.id).apply(response)

    return StandardResponse(
        data=LoginResponse(role=result.user.role, redirect_to=result.redirect_to)
    )


@router.post(
    "/logout",
    response_model=StandardResponse[MessageResponse],
    status_code=status.HTTP_200_OK,
)
async def logout(
    request: Request,
    response: Response,
    context: CurrentContext,
) -> StandardResponse[MessageResponse]:
    """
    End the current session and clear the cookie.

    Succeeds without a session too; the caller is simply told it was already
    logged out.
    """
    # A rotated session replaces the inbound token during context construction
    token = context.session.id if context.session else read_session_token(request)
    auth_service = AuthService(context.db)
    if not auth_service.logout(token):
        return StandardResponse(data=MessageResponse(message="Already logged out"))

    log_logout(context.user.id if context.user else None, get_client_ip(request))
    auth_service.session_manager.create_blank_session_cookie().apply(response)
    return StandardResponse(data=MessageResponse(message="Logged out successfully"))


@router.get(
    "/validate",
    response_model=StandardResponse[SessionValidationResponse],
    status_code=status.HTTP_200_OK,
)
async def validate(context: CurrentContext) -> StandardResponse[SessionValidationResponse]:
    """Return the resolved identity, or nulls for an anonymous caller."""
    if context.user is None or context.session is None:
        return StandardResponse(data=SessionValidationResponse())

    return StandardResponse(
        data=SessionValidationResponse(
            user=SessionUser(
                id=context.user.id,
                email=context.user.email,
                name=context.user.name,
                role=context.user.role,
            ),
            session=SessionInfo(
                id=context.session.id,
                user_id=context.session.user_id,
                expires_at=context.session.expires_at,
            ),
        )
    )


@router.post(
    "/clear-cookies",
    response_model=StandardResponse[MessageResponse],
    status_code=status.HTTP_200_OK,
)
async def clear_cookies(response: Response) -> StandardResponse[MessageResponse]:
    """Send a blank session cookie without touching the session store."""
    create_blank_session_cookie().apply(response)
    response.headers["Cache-Control"] = "no-store"
    return StandardResponse(data=MessageResponse(message="Cookies cleared"))
