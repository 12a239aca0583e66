"""Statistics and analytic views."""

from fastapi import APIRouter, Depends

from taskdesk.api.deps import get_analytics_service
from taskdesk.models.task import TaskPriority
from taskdesk.schemas.task import DashboardStats, TaskResponse, TaskStats
from taskdesk.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/stats", response_model=TaskStats)
def get_task_stats(analytics: AnalyticsService = Depends(get_analytics_service)) -> TaskStats:
    """Get summary counters for tasks."""
    return analytics.get_tasks_stats()


@router.get("/stats/dashboard", response_model=DashboardStats)
def get_dashboard(analytics: AnalyticsService = Depends(get_analytics_service)) -> DashboardStats:
    return analytics.get_dashboard_stats()


@router.get("/stats/completion-rate", response_model=dict[str, float])
def get_completion_rate(
    period: str = "month",
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> dict[str, float]:
    """Completion figures for tasks due in the last week, month or year."""
    return analytics.get_completion_rate(period)


@router.get("/stats/overdue", response_model=list[TaskResponse])
def get_overdue_tasks(analytics: AnalyticsService = Depends(get_analytics_service)) -> list[TaskResponse]:
    return analytics.tasks.to_responses(analytics.get_overdue_tasks())


@router.get("/stats/high-priority", response_model=list[TaskResponse])
def get_high_priority_tasks(
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> list[TaskResponse]:
    return analytics.tasks.to_responses(analytics.get_high_priority_tasks())


@router.get("/stats/by-priority", response_model=dict[TaskPriority, list[TaskResponse]])
def get_tasks_by_priority(
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> dict[TaskPriority, list[TaskResponse]]:
    groups = analytics.get_tasks_by_priority()
    return {priority: analytics.tasks.to_responses(tasks) for priority, tasks in groups.items()}
