"""Pydantic schemas for Task CRUD operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.schemas.query import TaskFilter, TaskSort, naive_local

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


def _clean_title(v):
    # Strip first so the length limits apply to the stored title
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or just whitespace")
    return v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH)
    priority: TaskPriority | None = None  # None means medium
    due_date: datetime | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v):
        """Validate title is not just whitespace"""
        return _clean_title(v)

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, v):
        return "" if v is None else v

    @field_validator("priority", "due_date", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        return _blank_to_none(v)

    @field_validator("due_date")
    @classmethod
    def due_date_wall_clock(cls, v):
        return naive_local(v)


class TaskUpdate(BaseModel):
    """Schema for updating an existing task (all fields optional).

    Only fields that were explicitly set are applied. ``due_date=None`` clears
    the deadline.
    """

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    archived: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v):
        """Validate title is not just whitespace"""
        return _clean_title(v)

    @field_validator("priority", mode="before")
    @classmethod
    def blank_priority_is_unset(cls, v):
        return _blank_to_none(v)

    @field_validator("due_date")
    @classmethod
    def due_date_wall_clock(cls, v):
        return naive_local(v)


class TaskResponse(BaseModel):
    """Schema for task responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    archived: bool = False
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    is_overdue: bool = False


class TaskListResponse(BaseModel):
    """Schema for paginated task list responses."""

    tasks: list[TaskResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool
    filter: TaskFilter
    sort: TaskSort


class TaskStats(BaseModel):
    """Aggregate counters, recomputed on every request."""

    total_tasks: int = 0
    active_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    today_tasks: int = 0
    week_tasks: int = 0


class DashboardStats(BaseModel):
    """Snapshot for the dashboard view."""

    task_stats: TaskStats
    priority_breakdown: dict[TaskPriority, int]
    status_breakdown: dict[TaskStatus, int]
    recent_tasks: list[TaskResponse]
    upcoming_tasks: list[TaskResponse]
