"""SQL access for the tasks table."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy import Select, and_, case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskdesk.core.errors import NotFoundError, StorageError
from taskdesk.models.task import Task, TaskStatus
from taskdesk.repositories.query_builder import (
    WEEK_WINDOW,
    build_predicates,
    order_by_clauses,
    start_of_day,
    where_clause,
)
from taskdesk.schemas.query import TaskFilter, TaskSort
from taskdesk.schemas.task import TaskStats


class TaskRepository:
    """Durable CRUD for tasks plus the aggregate queries behind the dashboard.

    Every mutating method issues a single statement and commits it. Nothing
    here validates request shape; callers are expected to have done that.
    Reads always repopulate entities from the database, so a caller never
    sees a stale copy left in the session.
    """

    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = datetime.now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.db = db
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    # ---- reads ----

    def get_by_id(self, task_id: int) -> Task:
        try:
            task = self.db.get(Task, task_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise self._fail("get_by_id", e, task_id) from e
        if task is None:
            raise NotFoundError(task_id, operation="get_by_id")
        return task

    def get_all(self, task_filter: TaskFilter | None = None, task_sort: TaskSort | None = None) -> list[Task]:
        stmt = self._filtered(select(Task), task_filter or TaskFilter())
        stmt = stmt.order_by(*order_by_clauses(task_sort or TaskSort()))
        return self._fetch("get_all", stmt)

    def count(self, task_filter: TaskFilter | None = None) -> int:
        stmt = self._filtered(select(func.count(Task.id)), task_filter or TaskFilter())
        try:
            return self.db.scalar(stmt) or 0
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e

    def get_recent(self, limit: int) -> list[Task]:
        """Most recently created tasks first."""
        stmt = select(Task).order_by(Task.created_at.desc(), Task.id.desc()).limit(limit)
        return self._fetch("get_recent", stmt)

    def get_upcoming(self, limit: int) -> list[Task]:
        """Active tasks due now or later, soonest first."""
        stmt = (
            select(Task)
            .where(
                Task.status == TaskStatus.ACTIVE.value,
                Task.due_date.isnot(None),
                Task.due_date >= self.clock(),
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
            .limit(limit)
        )
        return self._fetch("get_upcoming", stmt)

    def get_stats(self) -> TaskStats:
        """All counters in one aggregate query."""
        now = self.clock()
        today = start_of_day(now)
        active = Task.status == TaskStatus.ACTIVE.value

        def count_where(*conditions):
            return func.count(case((and_(*conditions), 1)))

        stmt = select(
            func.count(Task.id),
            count_where(active),
            count_where(Task.status == TaskStatus.COMPLETED.value),
            count_where(active, Task.due_date.isnot(None), Task.due_date < now),
            count_where(active, Task.due_date >= today, Task.due_date < today + timedelta(days=1)),
            count_where(active, Task.due_date >= now, Task.due_date <= now + WEEK_WINDOW),
        )
        try:
            total, active_count, completed, overdue, due_today, due_week = self.db.execute(stmt).one()
        except SQLAlchemyError as e:
            raise self._fail("get_stats", e) from e

        return TaskStats(
            total_tasks=total or 0,
            active_tasks=active_count or 0,
            completed_tasks=completed or 0,
            overdue_tasks=overdue or 0,
            today_tasks=due_today or 0,
            week_tasks=due_week or 0,
        )

    # ---- writes ----

    def create(self, task: Task) -> Task:
        """Persist a new task, stamping identity and timestamps."""
        now = self.clock()
        task.created_at = now
        task.updated_at = now
        try:
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
        except SQLAlchemyError as e:
            raise self._fail("create", e) from e
        self.logger.info(f"Created task with ID: {task.id}")
        return task

    def update(self, task: Task) -> Task:
        """Write back every mutable field of ``task`` and return the stored row."""
        if task in self.db:
            # The UPDATE below is the only write; keep the unit of work out of it
            self.db.expunge(task)
        stmt = (
            update(Task)
            .where(Task.id == task.id)
            .values(
                title=task.title,
                description=task.description,
                priority=task.priority,
                due_date=task.due_date,
                archived=task.archived,
                updated_at=self.clock(),
            )
        )
        self._execute_on_row("update", stmt, task.id)
        self.logger.info(f"Updated task with ID: {task.id}")
        return self.get_by_id(task.id)

    def delete(self, task_id: int) -> None:
        self._execute_on_row("delete", delete(Task).where(Task.id == task_id), task_id)
        self.logger.info(f"Deleted task with ID: {task_id}")

    def mark_completed(self, task_id: int) -> None:
        now = self.clock()
        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .values(status=TaskStatus.COMPLETED.value, completed_at=now, updated_at=now)
        )
        self._execute_on_row("mark_completed", stmt, task_id)

    def mark_active(self, task_id: int) -> None:
        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .values(status=TaskStatus.ACTIVE.value, completed_at=None, updated_at=self.clock())
        )
        self._execute_on_row("mark_active", stmt, task_id)

    # ---- helpers ----

    def _filtered(self, stmt: Select, task_filter: TaskFilter) -> Select:
        condition = where_clause(build_predicates(task_filter, self.clock()))
        if condition is not None:
            stmt = stmt.where(condition)
        return stmt

    def _fetch(self, operation: str, stmt: Select) -> list[Task]:
        try:
            return list(self.db.scalars(stmt.execution_options(populate_existing=True)))
        except SQLAlchemyError as e:
            raise self._fail(operation, e) from e

    def _execute_on_row(self, operation: str, stmt, task_id: int) -> None:
        """Run a single-row statement and commit; NotFound if nothing matched."""
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(task_id, operation=operation)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail(operation, e, task_id) from e

    def _fail(self, operation: str, exc: SQLAlchemyError, task_id: int | None = None) -> StorageError:
        self.db.rollback()
        self.logger.error(f"Database error during {operation}: {exc}")
        return StorageError(
            f"Database operation failed: {exc.__class__.__name__}",
            operation=operation,
            task_id=task_id,
        )
