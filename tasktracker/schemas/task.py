"""Task schemas for API requests and responses."""

from datetime import UTC, date, datetime, time
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tasktracker.models.task import TaskPriority, TaskStatus

TaskSortField = Literal["title", "created_at", "status", "priority"]
SortOrder = Literal["asc", "desc"]


class TaskCreate(BaseModel):
    """Schema for creating a task. Status always starts as pending."""

    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: str | None = Field(None, description="Task description")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only fields that are sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=255, description="Task title")
    description: str | None = Field(None, description="Task description")
    status: TaskStatus | None = Field(None, description="Task status")
    priority: TaskPriority | None = Field(None, description="Task priority")

    @field_validator("title", "status", "priority")
    @classmethod
    def reject_null(cls, v):
        # description may be cleared with null; these columns may not
        if v is None:
            raise ValueError("may not be null")
        return v

    def changes(self) -> dict:
        """Fields explicitly sent by the client, as column values."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value.value if isinstance(value, (TaskStatus, TaskPriority)) else value
            for key, value in data.items()
        }


class TaskResponse(BaseModel):
    """Schema for task response."""

    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    user_id: str

    model_config = ConfigDict(from_attributes=True)


class TaskOwner(BaseModel):
    """Minimal owner identity shown next to tasks in the admin listing."""

    id: str
    email: str
    name: str | None

    model_config = ConfigDict(from_attributes=True)


class TaskWithOwnerResponse(TaskResponse):
    """Task plus its owner, for the admin listing."""

    owner: TaskOwner


class TaskDeleteResponse(BaseModel):
    """Confirmation of a delete with a snapshot of the removed row."""

    success: bool = True
    deleted_task: TaskResponse


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TaskListQuery(BaseModel):
    """Filters, sort and pagination for task listings. Filters combine with AND."""

    page: int = Field(default=1, ge=1, description="Page number")
    limit: int = Field(default=10, ge=1, le=100, description="Page size")
    status: TaskStatus | None = Field(None, description="Filter by status")
    priority: TaskPriority | None = Field(None, description="Filter by priority")
    priorities: list[TaskPriority] | None = Field(None, description="Filter by any of these priorities")
    search: str | None = Field(
        None, max_length=255, description="Case-insensitive match on title or description"
    )
    created_from: datetime | None = Field(None, description="Created at or after")
    created_to: datetime | None = Field(
        None, description="Created at or before; a date without a time includes that whole day"
    )
    sort_by: TaskSortField = Field(default="created_at", description="Sort field")
    sort_order: SortOrder = Field(default="desc", description="Sort direction")

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("created_to", mode="before")
    @classmethod
    def date_only_upper_bound_is_end_of_day(cls, v):
        """`created_to=2024-01-05` covers the whole of that day."""
        if isinstance(v, str) and "T" not in v and " " not in v.strip():
            try:
                v = date.fromisoformat(v.strip())
            except ValueError:
                return v
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.max, tzinfo=UTC)
        return v

    @field_validator("created_from", "created_to")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return _to_utc(v)

    @model_validator(mode="after")
    def check_date_range(self) -> "TaskListQuery":
        if self.created_from and self.created_to and self.created_from > self.created_to:
            raise ValueError("created_from must not be after created_to")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class AdminTaskListQuery(TaskListQuery):
    """Task listing across all users, optionally narrowed to one owner."""

    user_id: str | None = Field(None, description="Filter by owning user")
