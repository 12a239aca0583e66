"""CRUD API endpoints for tasks."""

from fastapi import APIRouter, Depends, Query, status

from taskdesk.api import wire
from taskdesk.api.deps import get_task_service
from taskdesk.schemas.query import DEFAULT_PAGE_SIZE
from taskdesk.schemas.task import TaskListResponse, TaskResponse
from taskdesk.services.task_service import TaskService

router = APIRouter()


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    body: wire.TaskCreateBody,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Create a new task."""
    task = service.create_task(wire.create_request(body))
    return service.to_response(task)


@router.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    status_filter: str | None = Query(None, alias="status"),
    priority_filter: str | None = Query(None, alias="priority"),
    search: str | None = None,
    date_filter: str | None = None,
    due_from: str | None = None,
    due_to: str | None = None,
    archived: bool | None = Query(False),
    sort_field: str | None = None,
    sort_order: str | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """List tasks with optional filters; archived tasks are hidden unless asked for."""
    task_filter = wire.task_filter(
        status=status_filter,
        priority=priority_filter,
        search=search,
        date_filter=date_filter,
        due_from=due_from,
        due_to=due_to,
        archived=archived,
    )
    task_sort = wire.task_sort(sort_field, sort_order)
    return service.get_tasks_paged(task_filter, task_sort, page=page, page_size=page_size)


# Declared before /tasks/{task_id} so "archived" is not taken for an id
@router.get("/tasks/archived", response_model=list[TaskResponse])
def list_archived_tasks(service: TaskService = Depends(get_task_service)) -> list[TaskResponse]:
    return service.to_responses(service.get_archived_tasks())


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    """Get a specific task by ID."""
    return service.to_response(service.get_task_by_id(task_id))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    body: wire.TaskUpdateBody,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Update a task; fields missing from the body are left unchanged."""
    task = service.update_task(task_id, wire.update_request(body))
    return service.to_response(task)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)) -> None:
    """Delete a task."""
    service.delete_task(task_id)


@router.post("/tasks/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    """Flip a task between active and completed."""
    return service.to_response(service.toggle_status(task_id))


@router.post("/tasks/{task_id}/archive", response_model=TaskResponse)
def archive_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    """Archive a completed task."""
    return service.to_response(service.archive_task(task_id))
