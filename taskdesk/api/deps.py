"""Request-scoped dependencies: database session, clock and services."""

from collections.abc import Callable, Generator
from datetime import datetime

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from taskdesk.repositories.task_repository import TaskRepository
from taskdesk.services.analytics import AnalyticsService
from taskdesk.services.export import ExportService
from taskdesk.services.task_service import TaskService


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Callable[[], datetime]:
    return datetime.now


def get_task_service(
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskService:
    return TaskService(TaskRepository(db, clock=clock), clock=clock)


def get_analytics_service(tasks: TaskService = Depends(get_task_service)) -> AnalyticsService:
    return AnalyticsService(tasks)


def get_export_service(tasks: TaskService = Depends(get_task_service)) -> ExportService:
    return ExportService(tasks)
