from datetime import datetime, timedelta

import pytest

from taskdesk.core.errors import NotFoundError, StorageError
from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.services.analytics import months_before, period_start

from conftest import NOW


def test_months_before_clamps_day():
    assert months_before(datetime(2024, 3, 31, 8), 1) == datetime(2024, 2, 29, 8)
    assert months_before(datetime(2024, 1, 15), 1) == datetime(2023, 12, 15)
    assert months_before(datetime(2024, 2, 29), 12) == datetime(2023, 2, 28)


@pytest.mark.parametrize(
    "period, expected",
    [
        ("week", NOW - timedelta(days=7)),
        ("month", datetime(2024, 2, 15, 10, 30)),
        ("year", datetime(2023, 3, 15, 10, 30)),
        ("decade", NOW - timedelta(days=30)),
    ],
)
def test_period_start(period, expected):
    assert period_start(period, NOW) == expected


def test_stats_totals_add_up(analytics, make_task):
    make_task(status=TaskStatus.COMPLETED)
    make_task()
    make_task(archived=True)

    stats = analytics.get_tasks_stats()
    assert stats.total_tasks == 3
    assert stats.total_tasks == stats.active_tasks + stats.completed_tasks


def test_dashboard_reports_every_priority_and_status(analytics, make_task):
    make_task(priority=TaskPriority.HIGH)
    make_task(priority=TaskPriority.HIGH, status=TaskStatus.COMPLETED)

    dashboard = analytics.get_dashboard_stats()

    assert dashboard.priority_breakdown == {
        TaskPriority.LOW: 0,
        TaskPriority.MEDIUM: 0,
        TaskPriority.HIGH: 2,
    }
    assert dashboard.status_breakdown == {
        TaskStatus.ACTIVE: 1,
        TaskStatus.COMPLETED: 1,
    }
    assert sum(dashboard.priority_breakdown.values()) == dashboard.task_stats.total_tasks


def test_dashboard_lists_are_capped(analytics, make_task, clock):
    for i in range(7):
        clock.advance(minutes=1)
        make_task(title=f"task {i}", due_date=NOW + timedelta(days=i + 1))

    dashboard = analytics.get_dashboard_stats()

    assert [t.title for t in dashboard.recent_tasks] == ["task 6", "task 5", "task 4", "task 3", "task 2"]
    assert [t.title for t in dashboard.upcoming_tasks] == ["task 0", "task 1", "task 2", "task 3", "task 4"]


def test_completion_rate(analytics, make_task, clock):
    make_task(title="done", due_date=NOW - timedelta(days=3), status=TaskStatus.COMPLETED)
    make_task(title="late", due_date=NOW - timedelta(days=2))
    make_task(title="missed", due_date=NOW - timedelta(days=10))
    make_task(title="undated", status=TaskStatus.COMPLETED)
    make_task(title="future", due_date=NOW + timedelta(days=3))

    week = analytics.get_completion_rate("week")
    assert week["total_tasks"] == 2
    assert week["completed_tasks"] == 1
    assert week["active_tasks"] == 1
    assert week["completion_rate"] == 50.0
    assert week["overdue_tasks"] == 2
    assert week["overdue_rate"] == 100.0

    month = analytics.get_completion_rate("month")
    assert month["total_tasks"] == 3
    assert month["completion_rate"] == pytest.approx(100 / 3)


def test_completion_rate_with_nothing_due(analytics, make_task):
    make_task(title="undated")

    rates = analytics.get_completion_rate()
    assert rates["completion_rate"] == 0.0
    assert rates["total_tasks"] == 0
    assert "overdue_rate" not in rates


def test_completion_rate_without_overdue_figures(analytics, make_task, monkeypatch):
    make_task(due_date=NOW - timedelta(days=1))

    def broken():
        raise StorageError("connection lost", operation="get_overdue_tasks")

    monkeypatch.setattr(analytics, "get_overdue_tasks", broken)
    rates = analytics.get_completion_rate("week")

    assert rates["total_tasks"] == 1
    assert "overdue_tasks" not in rates
    assert "overdue_rate" not in rates


def test_overdue_tasks_longest_overdue_first(analytics, make_task):
    make_task(title="a bit late", due_date=NOW - timedelta(hours=1))
    make_task(title="very late", due_date=NOW - timedelta(days=4))
    make_task(title="done late", due_date=NOW - timedelta(days=5), status=TaskStatus.COMPLETED)
    make_task(title="not yet", due_date=NOW + timedelta(hours=1))

    assert [t.title for t in analytics.get_overdue_tasks()] == ["very late", "a bit late"]


def test_high_priority_tasks(analytics, make_task, clock):
    make_task(title="old high", priority=TaskPriority.HIGH)
    clock.advance(minutes=1)
    make_task(title="new high", priority=TaskPriority.HIGH)
    make_task(title="done high", priority=TaskPriority.HIGH, status=TaskStatus.COMPLETED)
    make_task(title="medium")

    assert [t.title for t in analytics.get_high_priority_tasks()] == ["new high", "old high"]


def test_tasks_by_priority_always_has_three_buckets(analytics, make_task):
    make_task(title="low", priority=TaskPriority.LOW)
    make_task(title="done", priority=TaskPriority.LOW, status=TaskStatus.COMPLETED)

    groups = analytics.get_tasks_by_priority()

    assert set(groups) == {TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH}
    assert [t.title for t in groups[TaskPriority.LOW]] == ["low"]
    assert groups[TaskPriority.HIGH] == []


def test_buy_milk_end_to_end(service, analytics):
    task = service.create_task({"title": "Buy milk", "priority": "high"})
    service.toggle_status(task.id)

    dashboard = analytics.get_dashboard_stats()
    assert dashboard.task_stats.completed_tasks == 1
    assert dashboard.status_breakdown[TaskStatus.COMPLETED] == 1
    assert dashboard.recent_tasks[0].title == "Buy milk"

    service.delete_task(task.id)
    with pytest.raises(NotFoundError):
        service.get_task_by_id(task.id)
    assert analytics.get_tasks_stats().total_tasks == 0
