"""Dashboard statistics and analytic views over tasks."""

import calendar
import logging
from datetime import datetime, timedelta

from taskdesk.core.errors import StorageError
from taskdesk.models.task import Task, TaskPriority, TaskStatus
from taskdesk.schemas.query import DateFilter, SortField, SortOrder, TaskFilter, TaskSort
from taskdesk.schemas.task import DashboardStats, TaskStats
from taskdesk.services.task_service import TaskService

DASHBOARD_LIST_SIZE = 5
DEFAULT_PERIOD = timedelta(days=30)


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier, day clamped."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> datetime:
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return months_before(now, 1)
    if period == "year":
        return months_before(now, 12)
    return now - DEFAULT_PERIOD


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


class AnalyticsService:
    """Aggregates store counters and task lists into dashboard views."""

    def __init__(self, tasks: TaskService, logger: logging.Logger | None = None) -> None:
        self.tasks = tasks
        self.repository = tasks.repository
        self.logger = logger or logging.getLogger(__name__)

    def get_tasks_stats(self) -> TaskStats:
        return self.repository.get_stats()

    def get_dashboard_stats(self) -> DashboardStats:
        stats = self.repository.get_stats()
        recent = self.repository.get_recent(DASHBOARD_LIST_SIZE)
        upcoming = self.repository.get_upcoming(DASHBOARD_LIST_SIZE)

        # Every enum value is reported, even with no tasks behind it
        priority_breakdown = {priority: 0 for priority in TaskPriority}
        status_breakdown = {status: 0 for status in TaskStatus}
        for task in self.tasks.get_tasks(TaskFilter(), TaskSort()):
            priority_breakdown[TaskPriority(task.priority)] += 1
            status_breakdown[TaskStatus(task.status)] += 1

        return DashboardStats(
            task_stats=stats,
            priority_breakdown=priority_breakdown,
            status_breakdown=status_breakdown,
            recent_tasks=self.tasks.to_responses(recent),
            upcoming_tasks=self.tasks.to_responses(upcoming),
        )

    def get_completion_rate(self, period: str = "month") -> dict[str, float]:
        """Completion figures for tasks due within ``period`` before now.

        Tasks without a due date never count, whatever their status.
        """
        now = self.tasks.clock()
        window = {"due_from": period_start(period, now), "due_to": now}

        total = len(self.tasks.get_tasks(TaskFilter(**window)))
        completed = len(
            self.tasks.get_tasks(TaskFilter(status=TaskStatus.COMPLETED, **window))
        )

        rates = {
            "completion_rate": _percent(completed, total),
            "total_tasks": float(total),
            "completed_tasks": float(completed),
            "active_tasks": float(total - completed),
        }

        try:
            overdue = len(self.get_overdue_tasks())
        except StorageError as e:
            self.logger.warning(f"Completion rate computed without overdue figures: {e}")
            return rates

        rates["overdue_tasks"] = float(overdue)
        if total > 0:
            rates["overdue_rate"] = _percent(overdue, total)
        return rates

    def get_overdue_tasks(self) -> list[Task]:
        """Active tasks past their due date, the longest overdue first."""
        tasks = self.tasks.get_tasks(
            TaskFilter(status=TaskStatus.ACTIVE, date_filter=DateFilter.OVERDUE),
            TaskSort(field=SortField.DUE_DATE, order=SortOrder.ASC),
        )
        now = self.tasks.clock()
        return [task for task in tasks if task.overdue_at(now)]

    def get_high_priority_tasks(self) -> list[Task]:
        return self.tasks.get_tasks(
            TaskFilter(status=TaskStatus.ACTIVE, priority=TaskPriority.HIGH),
            TaskSort(field=SortField.CREATED_AT, order=SortOrder.DESC),
        )

    def get_tasks_by_priority(self) -> dict[TaskPriority, list[Task]]:
        """Active tasks bucketed by priority; all three buckets always present."""
        groups: dict[TaskPriority, list[Task]] = {priority: [] for priority in TaskPriority}
        tasks = self.tasks.get_tasks(
            TaskFilter(status=TaskStatus.ACTIVE),
            TaskSort(field=SortField.PRIORITY, order=SortOrder.DESC),
        )
        for task in tasks:
            groups[TaskPriority(task.priority)].append(task)
        return groups
