"""Pydantic schemas for request/response validation."""

from taskdesk.schemas.query import DateFilter, SortField, SortOrder, TaskFilter, TaskSort
from taskdesk.schemas.task import (
    DashboardStats,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskStats,
    TaskUpdate,
)

__all__ = [
    "DashboardStats",
    "DateFilter",
    "SortField",
    "SortOrder",
    "TaskCreate",
    "TaskFilter",
    "TaskListResponse",
    "TaskResponse",
    "TaskSort",
    "TaskStats",
    "TaskUpdate",
]
