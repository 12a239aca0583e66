from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from taskdesk.api.deps import get_clock
from taskdesk.core.settings import Settings
from taskdesk.db.base import Base, create_db_engine, create_session_factory
from taskdesk.db.init_db import init_db
from taskdesk.main import create_application
from taskdesk.models.task import Task, TaskPriority, TaskStatus
from taskdesk.repositories.task_repository import TaskRepository
from taskdesk.services.analytics import AnalyticsService
from taskdesk.services.export import ExportService
from taskdesk.services.task_service import TaskService

# Friday mid-morning, so "today" and "this week" both have room on either side
NOW = datetime(2024, 3, 15, 10, 30)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test"""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Create a database session for tests"""
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db_session, clock):
    return TaskRepository(db_session, clock=clock)


@pytest.fixture
def service(repository, clock):
    return TaskService(repository, clock=clock)


@pytest.fixture
def analytics(service):
    return AnalyticsService(service)


@pytest.fixture
def exporter(service):
    return ExportService(service)


@pytest.fixture
def make_task(repository):
    """Insert a task straight through the repository, bypassing the rules."""

    def _make(
        title="Task",
        description="",
        priority=TaskPriority.MEDIUM,
        status=TaskStatus.ACTIVE,
        due_date=None,
        archived=False,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            priority=priority.value,
            status=TaskStatus.ACTIVE.value,
            due_date=due_date,
            archived=archived,
        )
        task = repository.create(task)
        if status == TaskStatus.COMPLETED:
            repository.mark_completed(task.id)
            task = repository.get_by_id(task.id)
        return task

    return _make


@pytest.fixture
def settings():
    return Settings(database_url_override="sqlite://", log_level="WARNING")


@pytest.fixture
def client(settings, clock):
    """Test client against a fresh application and in-memory database"""
    app = create_application(settings)
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
