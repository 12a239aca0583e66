"""Task model for todo management."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskdesk.db.base import Base


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Task completion status."""

    ACTIVE = "active"
    COMPLETED = "completed"


# Severity used for ordering; higher means more urgent
PRIORITY_RANK = {
    TaskPriority.LOW.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.HIGH.value: 3,
}


class Task(Base):
    """A single task/todo item."""

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'completed')", name="ck_tasks_status"),
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"),
        Index("idx_tasks_status_archived", "status", "archived"),
        Index("idx_tasks_priority_archived", "priority", "archived"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=TaskStatus.ACTIVE.value, nullable=False
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=TaskPriority.MEDIUM.value, nullable=False
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    archived: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED.value

    def overdue_at(self, now: datetime) -> bool:
        """An active task whose due date is strictly before ``now``."""
        return (
            self.status == TaskStatus.ACTIVE.value
            and self.due_date is not None
            and self.due_date < now
        )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status}, priority={self.priority})>"
