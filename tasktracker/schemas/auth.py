"""Authentication schemas for signup, login, and session validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tasktracker.models.user import UserRole, normalize_email


class SignupRequest(BaseModel):
    """Schema for signup request."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (at least 6 characters)")
    name: str | None = Field(None, max_length=255, description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="Requested role")

    @field_validator("email", mode="after")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(BaseModel):
    """Schema for login request."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="User password")
    selected_role: UserRole | None = Field(
        None,
        description="Role the user intends to sign in as; 'admin' requires an admin account",
    )

    @field_validator("email", mode="after")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class LoginResponse(BaseModel):
    """Schema for a successful login."""

    success: bool = True
    role: UserRole
    redirect_to: str = Field(..., description="Page the client should navigate to")


class SessionUser(BaseModel):
    """Public view of the authenticated user (no password hash)."""

    id: str
    email: str
    name: str | None
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class SessionInfo(BaseModel):
    """Public view of the current session."""

    id: str
    user_id: str
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionValidationResponse(BaseModel):
    """Schema for the session validation query; both fields null when anonymous."""

    user: SessionUser | None = None
    session: SessionInfo | None = None
