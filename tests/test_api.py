def create(client, **fields):
    payload = {"title": "Task", **fields}
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_check(client):
    """Test the health check endpoint"""
    response = client.get("/api/health/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "Taskdesk"


def test_create_task(client):
    """Test creating a task"""
    data = create(client, title="Buy milk", description="2 litres", priority="", due_date="2024-03-20")

    assert data["id"] is not None
    assert data["title"] == "Buy milk"
    assert data["priority"] == "medium"
    assert data["status"] == "active"
    assert data["due_date"] == "2024-03-20T00:00:00"
    assert data["completed_at"] is None
    assert data["is_overdue"] is False


def test_create_task_validation_error(client):
    response = client.post("/api/tasks", json={"title": "   "})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["field"] == "title"
    assert body["operation"] == "create_task"


def test_create_task_bad_date(client):
    response = client.post("/api/tasks", json={"title": "Task", "due_date": "next tuesday"})
    assert response.status_code == 400
    assert response.json()["field"] == "due_date"


def test_get_task_not_found(client):
    response = client.get("/api/tasks/999")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "NOT_FOUND"
    assert body["task_id"] == 999


def test_update_task(client):
    task = create(client, title="Draft", priority="low")

    response = client.put(f"/api/tasks/{task['id']}", json={"title": "Final", "priority": "high"})

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Final"
    assert data["priority"] == "high"


def test_toggle_and_conflict(client):
    task = create(client, title="Ship", priority="high")

    toggled = client.post(f"/api/tasks/{task['id']}/toggle").json()
    assert toggled["status"] == "completed"
    assert toggled["completed_at"] is not None

    response = client.put(f"/api/tasks/{task['id']}", json={"title": "Ship v2"})
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_archive_flow(client):
    task = create(client, title="Old news")

    response = client.post(f"/api/tasks/{task['id']}/archive")
    assert response.status_code == 409

    client.post(f"/api/tasks/{task['id']}/toggle")
    response = client.post(f"/api/tasks/{task['id']}/archive")
    assert response.status_code == 200
    assert response.json()["archived"] is True

    archived = client.get("/api/tasks/archived")
    assert archived.status_code == 200
    assert [t["id"] for t in archived.json()] == [task["id"]]

    # Archived tasks are hidden from the default listing
    assert client.get("/api/tasks").json()["total_count"] == 0


def test_list_tasks_with_filters(client):
    create(client, title="Write report", priority="high")
    create(client, title="Read report", priority="low")
    create(client, title="Call bank", priority="high")

    response = client.get(
        "/api/tasks",
        params={"priority": "high", "search": "REPORT", "status": "active"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 1
    assert data["tasks"][0]["title"] == "Write report"
    assert data["filter"]["priority"] == "high"


def test_list_tasks_sort_and_paging(client):
    for title in ("b", "a", "c"):
        create(client, title=title)

    response = client.get(
        "/api/tasks",
        params={"sort_field": "title", "sort_order": "asc", "page": 2, "page_size": 2},
    )

    data = response.json()
    assert [t["title"] for t in data["tasks"]] == ["c"]
    assert data["total_count"] == 3
    assert data["total_pages"] == 2
    assert data["has_previous"] is True


def test_delete_task(client):
    task = create(client)

    response = client.delete(f"/api/tasks/{task['id']}")
    assert response.status_code == 204

    response = client.get(f"/api/tasks/{task['id']}")
    assert response.status_code == 404


def test_stats_endpoints(client, clock):
    create(client, title="urgent", priority="high", due_date="2024-03-15")
    done = create(client, title="done")
    client.post(f"/api/tasks/{done['id']}/toggle")

    stats = client.get("/api/stats").json()
    assert stats["total_tasks"] == 2
    assert stats["completed_tasks"] == 1
    assert stats["overdue_tasks"] == 1

    dashboard = client.get("/api/stats/dashboard").json()
    assert dashboard["priority_breakdown"] == {"low": 0, "medium": 1, "high": 1}
    assert dashboard["status_breakdown"] == {"active": 1, "completed": 1}

    overdue = client.get("/api/stats/overdue").json()
    assert [t["title"] for t in overdue] == ["urgent"]
    assert overdue[0]["is_overdue"] is True

    high = client.get("/api/stats/high-priority").json()
    assert [t["title"] for t in high] == ["urgent"]

    by_priority = client.get("/api/stats/by-priority").json()
    assert set(by_priority) == {"low", "medium", "high"}
    assert by_priority["medium"] == []

    rate = client.get("/api/stats/completion-rate", params={"period": "week"}).json()
    assert rate["total_tasks"] == 1
    assert rate["completion_rate"] == 0.0


def test_export_endpoints(client):
    create(client, title="Export me", priority="high")

    csv_response = client.get("/api/export/csv")
    assert csv_response.status_code == 200
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert "attachment" in csv_response.headers["content-disposition"]
    assert "Export me" in csv_response.text

    json_response = client.get("/api/export/json", params={"priority": "low"})
    assert json_response.json()["count"] == 0

    html_response = client.get("/api/export/html")
    assert html_response.headers["content-type"].startswith("text/html")
    assert "Tasks Report" in html_response.text


def test_unarchive_through_update(client):
    task = create(client, title="Back from the archive")
    client.post(f"/api/tasks/{task['id']}/toggle")
    client.post(f"/api/tasks/{task['id']}/archive")

    response = client.put(f"/api/tasks/{task['id']}", json={"archived": False})

    assert response.status_code == 200
    assert response.json()["archived"] is False
    assert client.get("/api/tasks/archived").json() == []


def test_list_tasks_this_week_filter(client):
    create(client, title="due soon", due_date="2024-03-18")
    create(client, title="due later", due_date="2024-04-30")

    data = client.get("/api/tasks", params={"date_filter": "this-week"}).json()

    assert data["filter"]["date_filter"] == "week"
    assert [t["title"] for t in data["tasks"]] == ["due soon"]
