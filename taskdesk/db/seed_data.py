"""Seed the database with sample tasks."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from taskdesk.models.task import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


def sample_tasks(now: datetime) -> list[Task]:
    """A mix of active, completed, overdue and archived tasks relative to ``now``."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    def task(title, description, priority, status=TaskStatus.ACTIVE, created=timedelta(0), due=None, **extra):
        created_at = now - created
        completed_at = now if status == TaskStatus.COMPLETED else None
        return Task(
            title=title,
            description=description,
            priority=priority.value,
            status=status.value,
            due_date=due,
            archived=extra.pop("archived", False),
            created_at=created_at,
            updated_at=extra.pop("updated_at", created_at),
            completed_at=extra.pop("completed_at", completed_at),
        )

    return [
        task("Morning standup meeting", "Daily team sync", TaskPriority.HIGH,
             TaskStatus.COMPLETED, created=timedelta(days=1), due=today + timedelta(hours=9)),
        task("Review pull requests", "Code review for the filtering module", TaskPriority.MEDIUM,
             due=today + timedelta(hours=17)),
        task("Task with due date", "This task has a due date", TaskPriority.HIGH,
             due=now + timedelta(days=3)),
        task("Overdue task", "This task is overdue", TaskPriority.MEDIUM,
             created=timedelta(days=3), due=now - timedelta(days=1)),
        task("Long description task",
             "This task has a long description to check how longer text is displayed "
             "in the interface and stored in the database without any issues.",
             TaskPriority.LOW),
        task("Deploy to staging", "Push latest changes to the staging environment", TaskPriority.HIGH,
             due=today + timedelta(days=1, hours=14)),
        task("Update documentation", "Docs for the export endpoints", TaskPriority.LOW,
             due=today + timedelta(days=5)),
        task("Completed yesterday", "Finished the day before", TaskPriority.MEDIUM,
             TaskStatus.COMPLETED, created=timedelta(days=1), due=today - timedelta(hours=6),
             completed_at=now - timedelta(days=1), updated_at=now - timedelta(days=1)),
        task("Weekly report", "Compile the weekly summary", TaskPriority.LOW,
             TaskStatus.COMPLETED, created=timedelta(days=5), due=now - timedelta(days=4),
             completed_at=now - timedelta(days=4), updated_at=now - timedelta(days=4)),
        task("Month ago task", "Created a month ago and archived", TaskPriority.LOW,
             TaskStatus.COMPLETED, created=timedelta(days=30),
             completed_at=now - timedelta(days=29), updated_at=now - timedelta(days=29),
             archived=True),
        task("Recent active task", "Recently created active task", TaskPriority.HIGH,
             created=timedelta(hours=2)),
    ]


def seed_tasks(db: Session, clock: Callable[[], datetime] = datetime.now) -> int:
    """Replace all tasks with the sample set and return how many were added."""
    # Clear existing tasks
    db.execute(delete(Task))

    tasks = sample_tasks(clock())
    db.add_all(tasks)
    db.commit()

    logger.info(f"Seeded {len(tasks)} tasks")
    return len(tasks)


if __name__ == "__main__":
    from taskdesk.core.logging import setup_logging
    from taskdesk.core.settings import get_settings
    from taskdesk.db.base import create_db_engine, create_session_factory
    from taskdesk.db.init_db import init_db

    settings = get_settings()
    setup_logging(settings.log_level)
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    with create_session_factory(engine)() as session:
        seed_tasks(session)
