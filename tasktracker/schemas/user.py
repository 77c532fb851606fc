"""User schemas for admin views."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from tasktracker.models.user import UserRole


class UserResponse(BaseModel):
    """User as shown to administrators."""

    id: str
    email: str
    name: str | None
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
