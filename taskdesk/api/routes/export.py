"""Download the filtered task list as CSV, JSON or an HTML report."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from taskdesk.api import wire
from taskdesk.api.deps import get_export_service
from taskdesk.schemas.query import TaskFilter
from taskdesk.services.export import ExportService

router = APIRouter()


def export_filter(
    status_filter: str | None = Query(None, alias="status"),
    priority_filter: str | None = Query(None, alias="priority"),
    search: str | None = None,
    date_filter: str | None = None,
    archived: bool | None = None,
) -> TaskFilter:
    return wire.task_filter(
        status=status_filter,
        priority=priority_filter,
        search=search,
        date_filter=date_filter,
        archived=archived,
    )


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/export/csv")
def export_csv(
    task_filter: TaskFilter = Depends(export_filter),
    exporter: ExportService = Depends(get_export_service),
) -> Response:
    return Response(
        content=exporter.export_csv(task_filter),
        media_type="text/csv",
        headers=_attachment("tasks.csv"),
    )


@router.get("/export/json")
def export_json(
    task_filter: TaskFilter = Depends(export_filter),
    exporter: ExportService = Depends(get_export_service),
) -> Response:
    return Response(
        content=exporter.export_json(task_filter),
        media_type="application/json",
        headers=_attachment("tasks.json"),
    )


@router.get("/export/html", response_class=HTMLResponse)
def export_html(
    task_filter: TaskFilter = Depends(export_filter),
    exporter: ExportService = Depends(get_export_service),
) -> HTMLResponse:
    return HTMLResponse(content=exporter.export_html(task_filter))
