"""Translate TaskFilter/TaskSort into SQLAlchemy WHERE and ORDER BY clauses.

Filters are first turned into a flat list of predicates drawn from a small
closed set (``Equals``, ``Contains``, ``DateCompare``, ``Range``). The list
is always combined with AND; there is no way to express a union of filters.
Every value ends up as a bound parameter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import and_, case, or_
from sqlalchemy.sql import ColumnElement

from taskdesk.models.task import PRIORITY_RANK, Task, TaskStatus
from taskdesk.schemas.query import DateFilter, SortField, SortOrder, TaskFilter, TaskSort

LIKE_ESCAPE = "\\"
WEEK_WINDOW = timedelta(days=7)


class Predicate(ABC):
    @abstractmethod
    def clause(self) -> ColumnElement[bool]:
        """Render as a SQL boolean expression with bound values."""


@dataclass(frozen=True)
class Equals(Predicate):
    column: Any
    value: Any

    def clause(self) -> ColumnElement[bool]:
        return self.column == self.value


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match against any of ``columns``."""

    columns: tuple
    text: str

    def clause(self) -> ColumnElement[bool]:
        pattern = f"%{escape_like(self.text)}%"
        return or_(*(col.ilike(pattern, escape=LIKE_ESCAPE) for col in self.columns))


@dataclass(frozen=True)
class DateCompare(Predicate):
    column: Any
    op: str  # one of lt, le, gt, ge
    value: datetime

    def clause(self) -> ColumnElement[bool]:
        if self.op == "lt":
            return self.column < self.value
        if self.op == "le":
            return self.column <= self.value
        if self.op == "gt":
            return self.column > self.value
        if self.op == "ge":
            return self.column >= self.value
        raise ValueError(f"Unknown comparison: {self.op}")


@dataclass(frozen=True)
class Range(Predicate):
    """Inclusive bounds; either side may be open."""

    column: Any
    start: datetime | None = None
    end: datetime | None = None

    def clause(self) -> ColumnElement[bool]:
        parts = []
        if self.start is not None:
            parts.append(self.column >= self.start)
        if self.end is not None:
            parts.append(self.column <= self.end)
        return and_(*parts)


def escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def date_window_predicates(date_filter: DateFilter, now: datetime) -> list[Predicate]:
    """Predicates for the due-date window; ``all`` contributes nothing."""
    if date_filter == DateFilter.TODAY:
        today = start_of_day(now)
        return [
            DateCompare(Task.due_date, "ge", today),
            DateCompare(Task.due_date, "lt", today + timedelta(days=1)),
        ]
    if date_filter == DateFilter.WEEK:
        return [Range(Task.due_date, now, now + WEEK_WINDOW)]
    if date_filter == DateFilter.OVERDUE:
        return [
            Equals(Task.status, TaskStatus.ACTIVE.value),
            DateCompare(Task.due_date, "lt", now),
        ]
    return []


def build_predicates(task_filter: TaskFilter, now: datetime) -> list[Predicate]:
    predicates: list[Predicate] = []

    if task_filter.status is not None:
        predicates.append(Equals(Task.status, task_filter.status.value))
    if task_filter.priority is not None:
        predicates.append(Equals(Task.priority, task_filter.priority.value))
    if task_filter.archived is not None:
        predicates.append(Equals(Task.archived, task_filter.archived))
    if task_filter.search:
        predicates.append(Contains((Task.title, Task.description), task_filter.search))

    predicates.extend(date_window_predicates(task_filter.date_filter, now))

    if task_filter.due_from is not None or task_filter.due_to is not None:
        predicates.append(Range(Task.due_date, task_filter.due_from, task_filter.due_to))

    return predicates


def where_clause(predicates: list[Predicate]) -> ColumnElement[bool] | None:
    if not predicates:
        return None
    return and_(*(p.clause() for p in predicates))


def priority_rank():
    """Severity expression: low=1, medium=2, high=3."""
    return case(PRIORITY_RANK, value=Task.priority, else_=0)


def order_by_clauses(task_sort: TaskSort) -> list:
    """ORDER BY list for the requested sort, ties broken by id."""
    descending = task_sort.order == SortOrder.DESC

    if task_sort.field == SortField.PRIORITY:
        key = priority_rank()
    elif task_sort.field == SortField.TITLE:
        key = Task.title
    elif task_sort.field == SortField.DUE_DATE:
        key = Task.due_date
    elif task_sort.field == SortField.STATUS:
        key = Task.status
    elif task_sort.field == SortField.UPDATED_AT:
        key = Task.updated_at
    else:
        key = Task.created_at

    primary = key.desc() if descending else key.asc()
    if task_sort.field == SortField.DUE_DATE:
        # Undated tasks go last in both directions
        primary = primary.nulls_last()

    tiebreak = Task.id.desc() if descending else Task.id.asc()
    return [primary, tiebreak]
