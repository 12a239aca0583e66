import csv
import io
import json
from datetime import timedelta

from taskdesk.models.task import TaskPriority, TaskStatus
from taskdesk.services.export import CSV_HEADERS, EXPORT_FIELDS

from conftest import NOW


def test_csv_export(exporter, make_task, clock):
    make_task(title="Late, again", description='Said "soon"', due_date=NOW - timedelta(hours=1))
    clock.advance(minutes=1)
    make_task(title="Done", status=TaskStatus.COMPLETED)

    rows = list(csv.reader(io.StringIO(exporter.export_csv())))

    assert rows[0] == CSV_HEADERS
    assert len(rows) == 3
    # Newest first
    done, late = rows[1], rows[2]
    assert done[1] == "Done"
    assert done[3] == "completed"
    assert done[8] == "2024-03-15 10:31:00"
    assert late[1] == "Late, again"
    assert late[2] == 'Said "soon"'
    assert late[5] == "2024-03-15 09:30:00"
    assert late[8] == ""
    assert late[9] == "true"


def test_csv_export_respects_filter(exporter, make_task):
    make_task(title="high", priority=TaskPriority.HIGH)
    make_task(title="low", priority=TaskPriority.LOW)

    rows = list(csv.reader(io.StringIO(exporter.export_csv({"priority": "high"}))))
    assert [row[1] for row in rows[1:]] == ["high"]


def test_json_export(exporter, make_task):
    make_task(title="One")
    make_task(title="Two", archived=True)

    document = json.loads(exporter.export_json({"archived": False}))

    assert document["count"] == 1
    assert document["exported_at"] == "2024-03-15T10:30:00"
    assert document["filter"]["archived"] is False
    assert [t["title"] for t in document["tasks"]] == ["One"]
    assert set(EXPORT_FIELDS) <= set(document["tasks"][0])


def test_html_report_escapes_and_highlights(exporter, make_task):
    make_task(title="<script>alert(1)</script>", due_date=NOW - timedelta(hours=1))
    make_task(title="Fine")

    html = exporter.export_html({"search": "<"})

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert '<tr class="overdue">' in html
    assert "Search: &lt;" in html
    assert "Total tasks: 1" in html
    assert "Fine" not in html
