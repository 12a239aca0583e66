"""CSV, JSON and HTML renderings of a filtered task list."""

import csv
import io
from collections.abc import Mapping
from datetime import datetime
from html import escape

from pydantic import BaseModel

from taskdesk.schemas.query import TaskFilter, TaskSort
from taskdesk.schemas.task import TaskResponse
from taskdesk.services.task_service import TaskService, parse_request

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

EXPORT_FIELDS = [
    "id",
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "created_at",
    "updated_at",
    "completed_at",
    "is_overdue",
]

CSV_HEADERS = [
    "ID",
    "Title",
    "Description",
    "Status",
    "Priority",
    "Due Date",
    "Created At",
    "Updated At",
    "Completed At",
    "Is Overdue",
]

REPORT_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        h1 { color: #333; }
        .header { margin-bottom: 20px; }
        .filter-info { background: #f5f5f5; padding: 10px; margin-bottom: 20px; }
        table { width: 100%; border-collapse: collapse; }
        th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
        th { background-color: #f2f2f2; }
        .status-active { color: #007bff; }
        .status-completed { color: #28a745; }
        .priority-high { color: #dc3545; font-weight: bold; }
        .priority-medium { color: #ffc107; }
        .priority-low { color: #6c757d; }
        .overdue { background-color: #ffebee; }
"""


class TaskExport(BaseModel):
    """JSON export document."""

    exported_at: datetime
    filter: TaskFilter
    count: int
    tasks: list[TaskResponse]


def _fmt(value: datetime | None, fmt: str = DATETIME_FORMAT) -> str:
    return value.strftime(fmt) if value is not None else ""


class ExportService:
    """Serializes the rule layer's task listings; adds no rules of its own."""

    def __init__(self, tasks: TaskService) -> None:
        self.tasks = tasks

    def _load(self, task_filter: TaskFilter | Mapping | None) -> tuple[TaskFilter, list[TaskResponse]]:
        task_filter = parse_request(TaskFilter, task_filter, "export")
        # Newest first, same as the default listing
        rows = self.tasks.get_tasks(task_filter, TaskSort())
        return task_filter, self.tasks.to_responses(rows)

    def export_csv(self, task_filter: TaskFilter | Mapping | None = None) -> str:
        _, tasks = self._load(task_filter)

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_HEADERS)
        for task in tasks:
            writer.writerow([
                task.id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                _fmt(task.due_date),
                _fmt(task.created_at),
                _fmt(task.updated_at),
                _fmt(task.completed_at),
                "true" if task.is_overdue else "false",
            ])
        return buffer.getvalue()

    def export_json(self, task_filter: TaskFilter | Mapping | None = None) -> str:
        task_filter, tasks = self._load(task_filter)
        document = TaskExport(
            exported_at=self.tasks.clock(),
            filter=task_filter,
            count=len(tasks),
            tasks=tasks,
        )
        return document.model_dump_json(indent=2)

    def export_html(self, task_filter: TaskFilter | Mapping | None = None) -> str:
        """Standalone HTML report: header, applied filters and a task table."""
        task_filter, tasks = self._load(task_filter)

        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '    <meta charset="UTF-8">',
            "    <title>Tasks Report</title>",
            f"    <style>{REPORT_STYLE}    </style>",
            "</head>",
            "<body>",
            '    <div class="header">',
            "        <h1>Tasks Report</h1>",
            f"        <p>Generated on: {_fmt(self.tasks.clock())}</p>",
            f"        <p>Total tasks: {len(tasks)}</p>",
            "    </div>",
            '    <div class="filter-info">',
            "        <h3>Applied Filters:</h3>",
        ]
        if task_filter.status is not None:
            parts.append(f"        <p>Status: {task_filter.status.value}</p>")
        if task_filter.priority is not None:
            parts.append(f"        <p>Priority: {task_filter.priority.value}</p>")
        if task_filter.search:
            parts.append(f"        <p>Search: {escape(task_filter.search)}</p>")
        parts += [
            "    </div>",
            "    <table>",
            "        <thead>",
            "            <tr><th>ID</th><th>Title</th><th>Status</th><th>Priority</th><th>Due Date</th><th>Created</th></tr>",
            "        </thead>",
            "        <tbody>",
        ]
        for task in tasks:
            row_class = "overdue" if task.is_overdue else ""
            parts.append(
                f'            <tr class="{row_class}">'
                f"<td>{task.id}</td>"
                f"<td>{escape(task.title)}</td>"
                f'<td class="status-{task.status.value}">{task.status.value}</td>'
                f'<td class="priority-{task.priority.value}">{task.priority.value}</td>'
                f"<td>{_fmt(task.due_date, DATE_FORMAT)}</td>"
                f"<td>{_fmt(task.created_at, DATE_FORMAT)}</td>"
                "</tr>"
            )
        parts += [
            "        </tbody>",
            "    </table>",
            "</body>",
            "</html>",
        ]
        return "\n".join(parts)
