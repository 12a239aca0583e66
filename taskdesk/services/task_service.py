"""Validation and lifecycle rules for tasks.

All request shapes are checked here before anything reaches the
repository; the repository itself only reports missing rows and database
failures.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from taskdesk.core.errors import ConflictError, ValidationError
from taskdesk.models.task import Task, TaskPriority, TaskStatus
from taskdesk.repositories.task_repository import TaskRepository
from taskdesk.schemas.query import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SortField, SortOrder, TaskFilter, TaskSort
from taskdesk.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate

# Due dates up to one day in the past are still accepted
DUE_DATE_GRACE = timedelta(days=1)

# Fields a completed task refuses to change
FROZEN_WHEN_COMPLETED = ("title", "priority")

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_request(model: type[ModelT], data: Any, operation: str) -> ModelT:
    """Validate ``data`` (a model instance, a mapping or None) as ``model``.

    Instances are re-validated from their explicitly set fields, so partial
    updates keep their shape.
    """
    if data is None:
        data = {}
    elif isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    elif not isinstance(data, Mapping):
        raise ValidationError(
            f"Expected {model.__name__}, got {type(data).__name__}", operation=operation
        )
    try:
        return model.model_validate(data)
    except SchemaValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        raise ValidationError(error["msg"], operation=operation, field=field) from e


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class TaskService:
    """Use cases over the task store: create, update, delete, toggle, list."""

    def __init__(
        self,
        repository: TaskRepository,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repository = repository
        self.clock = clock or repository.clock
        self.logger = logger or logging.getLogger(__name__)

    # ---- conversion ----

    def to_response(self, task: Task) -> TaskResponse:
        response = TaskResponse.model_validate(task)
        return response.model_copy(update={"is_overdue": task.overdue_at(self.clock())})

    def to_responses(self, tasks: list[Task]) -> list[TaskResponse]:
        return [self.to_response(task) for task in tasks]

    # ---- commands ----

    def create_task(self, request: TaskCreate | Mapping) -> Task:
        req = parse_request(TaskCreate, request, "create_task")
        self._check_due_date(req.due_date, "create_task")

        task = Task(
            title=req.title,
            description=req.description,
            status=TaskStatus.ACTIVE.value,
            priority=(req.priority or TaskPriority.MEDIUM).value,
            due_date=req.due_date,
            archived=False,
        )
        return self.repository.create(task)

    def update_task(self, task_id: int, request: TaskUpdate | Mapping) -> Task:
        """Apply the explicitly set fields of ``request`` to an existing task."""
        operation = "update_task"
        self._check_id(task_id, operation)
        req = parse_request(TaskUpdate, request, operation)

        changes = {
            field: _plain(value)
            for field, value in req.model_dump(exclude_unset=True).items()
            # due_date=None clears the deadline; None elsewhere means "keep"
            if value is not None or field == "due_date"
        }
        if "due_date" in changes:
            self._check_due_date(changes["due_date"], operation)

        existing = self.repository.get_by_id(task_id)

        if existing.is_completed:
            for field in FROZEN_WHEN_COMPLETED:
                if field in changes and changes[field] != getattr(existing, field):
                    raise ConflictError(
                        f"Cannot modify {field} of a completed task",
                        operation=operation,
                        task_id=task_id,
                        field=field,
                    )
        elif changes.get("archived"):
            raise ConflictError(
                "Only completed tasks can be archived",
                operation=operation,
                task_id=task_id,
                field="archived",
            )

        for field, value in changes.items():
            setattr(existing, field, value)
        return self.repository.update(existing)

    def delete_task(self, task_id: int) -> None:
        self._check_id(task_id, "delete_task")
        self.repository.get_by_id(task_id)
        self.repository.delete(task_id)

    def toggle_status(self, task_id: int) -> Task:
        """Flip active <-> completed and return the stored result."""
        self._check_id(task_id, "toggle_status")
        task = self.repository.get_by_id(task_id)

        if task.status == TaskStatus.ACTIVE.value:
            self.repository.mark_completed(task_id)
            self.logger.info(f"Task {task_id} marked as completed")
        else:
            self.repository.mark_active(task_id)
            self.logger.info(f"Task {task_id} marked as active")

        return self.repository.get_by_id(task_id)

    def archive_task(self, task_id: int) -> Task:
        task = self.get_task_by_id(task_id)
        if not task.is_completed:
            raise ConflictError(
                "Task must be completed before archiving",
                operation="archive_task",
                task_id=task_id,
                field="status",
            )
        return self.update_task(task_id, TaskUpdate(archived=True))

    # ---- queries ----

    def get_task_by_id(self, task_id: int) -> Task:
        self._check_id(task_id, "get_task_by_id")
        return self.repository.get_by_id(task_id)

    def get_tasks(
        self,
        task_filter: TaskFilter | Mapping | None = None,
        task_sort: TaskSort | Mapping | None = None,
    ) -> list[Task]:
        task_filter, task_sort = self._parse_query(task_filter, task_sort, "get_tasks")
        return self.repository.get_all(task_filter, task_sort)

    def count_tasks(self, task_filter: TaskFilter | Mapping | None = None) -> int:
        task_filter, _ = self._parse_query(task_filter, None, "count_tasks")
        return self.repository.count(task_filter)

    def get_tasks_paged(
        self,
        task_filter: TaskFilter | Mapping | None = None,
        task_sort: TaskSort | Mapping | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TaskListResponse:
        """Return one page of the filtered, sorted listing.

        ``page`` below 1 becomes 1 and a ``page_size`` outside [1, 100]
        becomes 20. A page past the end is empty but still reports the total.
        """
        if page < 1:
            page = 1
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            page_size = DEFAULT_PAGE_SIZE

        task_filter, task_sort = self._parse_query(task_filter, task_sort, "get_tasks_paged")
        tasks = self.repository.get_all(task_filter, task_sort)

        total_count = len(tasks)
        start = (page - 1) * page_size
        page_tasks = tasks[start:start + page_size]
        total_pages = (total_count + page_size - 1) // page_size if total_count > 0 else 1

        return TaskListResponse(
            tasks=self.to_responses(page_tasks),
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
            filter=task_filter,
            sort=task_sort,
        )

    def get_archived_tasks(self) -> list[Task]:
        return self.get_tasks(
            TaskFilter(archived=True),
            TaskSort(field=SortField.UPDATED_AT, order=SortOrder.DESC),
        )

    # ---- checks ----

    def _parse_query(self, task_filter, task_sort, operation: str) -> tuple[TaskFilter, TaskSort]:
        task_filter = parse_request(TaskFilter, task_filter, operation)
        task_sort = parse_request(TaskSort, task_sort, operation)
        if (
            task_filter.due_from is not None
            and task_filter.due_to is not None
            and task_filter.due_from > task_filter.due_to
        ):
            raise ValidationError(
                "due_from cannot be later than due_to", operation=operation, field="due_from"
            )
        return task_filter, task_sort

    def _check_due_date(self, due_date: datetime | None, operation: str) -> None:
        if due_date is not None and due_date < self.clock() - DUE_DATE_GRACE:
            raise ValidationError(
                "Due date cannot be in the past", operation=operation, field="due_date"
            )

    @staticmethod
    def _check_id(task_id: int, operation: str) -> None:
        if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id <= 0:
            raise ValidationError(
                "ID must be a positive integer", operation=operation, field="id"
            )
