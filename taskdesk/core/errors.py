"""Error taxonomy shared by the task store and the rule layer."""


class TaskError(Exception):
    """Base class for every error the task core raises.

    Carries the operation name and, where known, the offending task id or
    field so the caller can render a specific message.
    """

    code = "TASK_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        task_id: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.task_id = task_id
        self.field = field

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "code": self.code,
            "operation": self.operation,
            "task_id": self.task_id,
            "field": self.field,
        }


class ValidationError(TaskError):
    """Malformed or out-of-range input, detected before any storage call."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(TaskError):
    """The id does not resolve to an existing row."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, task_id: int, *, operation: str | None = None) -> None:
        super().__init__(
            f"Task with id {task_id} not found",
            operation=operation,
            task_id=task_id,
        )


class ConflictError(TaskError):
    """A lifecycle rule forbids the requested change."""

    code = "CONFLICT"
    status_code = 409


class StorageError(TaskError):
    """Connectivity or constraint failure reported by the database."""

    code = "DATABASE_ERROR"
    status_code = 500
