"""Request bodies and string mapping for the HTTP front end.

The front end sends enums as plain strings and dates as ``YYYY-MM-DD``.
Unknown enum strings fall back through the tables below rather than failing.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel

from taskdesk.core.errors import ValidationError
from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.schemas.query import DateFilter, SortField, SortOrder, TaskFilter, TaskSort

DATE_FORMAT = "%Y-%m-%d"

PRIORITIES = {
    "low": TaskPriority.LOW,
    "medium": TaskPriority.MEDIUM,
    "high": TaskPriority.HIGH,
}
DEFAULT_PRIORITY = TaskPriority.MEDIUM

STATUSES = {
    "active": TaskStatus.ACTIVE,
    "completed": TaskStatus.COMPLETED,
}
DEFAULT_STATUS = TaskStatus.ACTIVE

DATE_FILTERS = {
    "all": DateFilter.ALL,
    "today": DateFilter.TODAY,
    "week": DateFilter.WEEK,
    "this-week": DateFilter.WEEK,
    "this_week": DateFilter.WEEK,
    "overdue": DateFilter.OVERDUE,
}
DEFAULT_DATE_FILTER = DateFilter.ALL

# Filter values meaning "any"
UNCONSTRAINED = ("", "all")


class TaskCreateBody(BaseModel):
    title: str = ""
    description: str = ""
    priority: str = ""
    due_date: str = ""


class TaskUpdateBody(BaseModel):
    """Fields left out of the body are kept; an empty ``due_date`` clears it."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    due_date: str | None = None
    archived: bool | None = None


def priority_from_wire(value: str | None) -> TaskPriority:
    return PRIORITIES.get((value or "").strip().lower(), DEFAULT_PRIORITY)


def status_filter_from_wire(value: str | None) -> TaskStatus | None:
    key = (value or "").strip().lower()
    if key in UNCONSTRAINED:
        return None
    return STATUSES.get(key, DEFAULT_STATUS)


def priority_filter_from_wire(value: str | None) -> TaskPriority | None:
    return PRIORITIES.get((value or "").strip().lower())


def date_filter_from_wire(value: str | None) -> DateFilter:
    return DATE_FILTERS.get((value or "").strip().lower(), DEFAULT_DATE_FILTER)


def date_from_wire(value: str | None, operation: str, field: str = "due_date") -> datetime | None:
    """Parse ``YYYY-MM-DD`` into local midnight; empty means no date."""
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError as e:
        raise ValidationError(
            f"Invalid date '{value}', expected YYYY-MM-DD",
            operation=operation,
            field=field,
        ) from e


def _end_of_day(value: datetime | None) -> datetime | None:
    # An upper date bound includes the whole day
    if value is None:
        return None
    return value + timedelta(days=1) - timedelta(microseconds=1)


def _choice(enum_cls, value: str | None, default):
    try:
        return enum_cls((value or "").strip().lower())
    except ValueError:
        return default


def create_request(body: TaskCreateBody) -> dict:
    return {
        "title": body.title,
        "description": body.description,
        "priority": priority_from_wire(body.priority),
        "due_date": date_from_wire(body.due_date, "create_task"),
    }


def update_request(body: TaskUpdateBody) -> dict:
    request = {}
    sent = body.model_dump(exclude_unset=True)
    if "title" in sent:
        request["title"] = body.title
    if "description" in sent:
        request["description"] = body.description
    if "priority" in sent:
        request["priority"] = priority_from_wire(body.priority)
    if "due_date" in sent:
        request["due_date"] = date_from_wire(body.due_date, "update_task")
    if "archived" in sent:
        request["archived"] = body.archived
    return request


def task_filter(
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    date_filter: str | None = None,
    due_from: str | None = None,
    due_to: str | None = None,
    archived: bool | None = None,
) -> TaskFilter:
    return TaskFilter(
        status=status_filter_from_wire(status),
        priority=priority_filter_from_wire(priority),
        search=search or "",
        date_filter=date_filter_from_wire(date_filter),
        due_from=date_from_wire(due_from, "get_tasks", "due_from"),
        due_to=_end_of_day(date_from_wire(due_to, "get_tasks", "due_to")),
        archived=archived,
    )


def task_sort(field: str | None = None, order: str | None = None) -> TaskSort:
    return TaskSort(
        field=_choice(SortField, field, SortField.CREATED_AT),
        order=_choice(SortOrder, order, SortOrder.DESC),
    )
