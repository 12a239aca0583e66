"""Filter, sort and pagination parameters for task listings."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from taskdesk.models.task import TaskPriority, TaskStatus

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def naive_local(value):
    """Drop timezone info, converting aware datetimes to local wall-clock time."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class DateFilter(str, Enum):
    """Due-date window applied on top of the other filters."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"


class SortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    TITLE = "title"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TaskFilter(BaseModel):
    """Which tasks a listing should contain.

    Every field left empty imposes no constraint; the remaining ones are
    combined with AND.
    """

    model_config = ConfigDict(frozen=True)

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str = ""
    date_filter: DateFilter = DateFilter.ALL
    due_from: datetime | None = None
    due_to: datetime | None = None
    archived: bool | None = None

    @field_validator("status", "priority", mode="before")
    @classmethod
    def empty_means_any(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("", "all"):
            return None
        return v

    @field_validator("date_filter", mode="before")
    @classmethod
    def empty_date_filter(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DateFilter.ALL
        return v

    @field_validator("due_from", "due_to")
    @classmethod
    def wall_clock(cls, v):
        return naive_local(v)

    @field_validator("search", mode="before")
    @classmethod
    def strip_search(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v


class TaskSort(BaseModel):
    """Ordering of a task listing. Defaults to newest first."""

    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC
