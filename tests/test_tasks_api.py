from datetime import datetime

import pytest

from taskboard.errors import StoreError
from taskboard.repositories import InMemoryTaskRepository


def create_task_payload(
    title="Test Task",
    description="Do something",
    completed=False,
    priority=None,
    due_date=None,
    category=None,
):
    payload = {
        "title": title,
        "description": description,
        "completed": completed,
    }
    if priority is not None:
        payload["priority"] = priority
    if due_date is not None:
        payload["dueDate"] = due_date
    if category is not None:
        payload["category"] = category
    return payload


def assert_task_shape(task: dict):
    for key in ["id", "title", "description", "completed", "priority", "dueDate", "category", "createdAt"]:
        assert key in task
    assert isinstance(task["id"], str) and task["id"]
    assert isinstance(task["title"], str)
    assert isinstance(task["completed"], bool)
    assert task["priority"] in ("low", "medium", "high")
    # Timestamps are ISO8601 strings parseable by datetime.fromisoformat
    datetime.fromisoformat(task["createdAt"])
    if task["dueDate"] is not None:
        datetime.fromisoformat(task["dueDate"])


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"message": "Healthy", "backend": "memory"}


class TestCreateTask:
    def test_create_applies_defaults(self, client):
        res = client.post("/api/tasks", json={"title": "Buy milk"})
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        assert task["title"] == "Buy milk"
        assert task["description"] == ""
        assert task["completed"] is False
        assert task["priority"] == "medium"
        assert task["dueDate"] is None
        assert task["category"] == "personal"

    def test_create_trims_text_fields(self, client):
        res = client.post(
            "/api/tasks",
            json=create_task_payload(title="  Pay rent ", description=" before Friday  ", category=" home "),
        )
        assert res.status_code == 201
        task = res.json()
        assert task["title"] == "Pay rent"
        assert task["description"] == "before Friday"
        assert task["category"] == "home"

    @pytest.mark.parametrize("category", ["", "   ", None])
    def test_create_blank_category_uses_default(self, client, category):
        res = client.post("/api/tasks", json={"title": "Water plants", "category": category})
        assert res.status_code == 201
        assert res.json()["category"] == "personal"

    def test_create_with_due_date_string(self, client):
        res = client.post("/api/tasks", json=create_task_payload(title="Pay bills", due_date="2099-12-25"))
        assert res.status_code == 201
        # Dates are promoted to midnight
        assert res.json()["dueDate"] == "2099-12-25T00:00:00"

    def test_create_accepts_utc_suffix(self, client):
        res = client.post("/api/tasks", json=create_task_payload(due_date="2099-12-25T10:00:00.000Z"))
        assert res.status_code == 201
        assert res.json()["dueDate"].startswith("2099-12-25T10:00:00")

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_create_rejects_blank_title_and_persists_nothing(self, client, title):
        res = client.post("/api/tasks", json=create_task_payload(title=title))
        assert res.status_code == 400
        assert res.json() == {"error": "ValidationError", "message": "Task title cannot be empty"}
        assert client.get("/api/tasks").json() == []

    def test_create_without_title_is_rejected(self, client):
        res = client.post("/api/tasks", json={"description": "no title"})
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        assert isinstance(body["detail"], list)

    def test_create_rejects_unknown_priority(self, client):
        res = client.post("/api/tasks", json=create_task_payload(priority="urgent"))
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"

    def test_create_rejects_bad_due_date(self, client):
        res = client.post("/api/tasks", json=create_task_payload(due_date="not-a-date"))
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"

    def test_client_supplied_id_and_created_at_are_ignored(self, client):
        payload = create_task_payload()
        payload.update({"id": "mine", "createdAt": "2000-01-01T00:00:00"})
        task = client.post("/api/tasks", json=payload).json()
        assert task["id"] != "mine"
        assert not task["createdAt"].startswith("2000-01-01")


class TestListTasks:
    def test_round_trip_create_then_list(self, client):
        payload = create_task_payload(
            title="Write report",
            description="Q3 numbers",
            completed=True,
            priority="high",
            due_date="2030-05-01",
            category="work",
        )
        created = client.post("/api/tasks", json=payload).json()

        listed = client.get("/api/tasks").json()
        assert len(listed) == 1
        task = listed[0]
        assert task == created
        assert task["title"] == "Write report"
        assert task["description"] == "Q3 numbers"
        assert task["completed"] is True
        assert task["priority"] == "high"
        assert task["dueDate"] == "2030-05-01T00:00:00"
        assert task["category"] == "work"

    def test_ids_are_unique_and_stable(self, client):
        ids = [client.post("/api/tasks", json=create_task_payload(title=f"Task {i}")).json()["id"] for i in range(10)]
        assert len(set(ids)) == 10

        listed = client.get("/api/tasks").json()
        # Natural store order is creation order
        assert [t["id"] for t in listed] == ids
        assert [t["id"] for t in client.get("/api/tasks").json()] == ids

    def test_get_single_task(self, client):
        created = client.post("/api/tasks", json=create_task_payload(title="Read book")).json()
        res = client.get(f"/api/tasks/{created['id']}")
        assert res.status_code == 200
        assert res.json() == created

        res_404 = client.get("/api/tasks/does-not-exist")
        assert res_404.status_code == 404
        assert res_404.json() == {"error": "NotFoundError", "message": "Task not found"}

    def test_store_failure_is_reported_as_500(self, app, client):
        class BrokenRepository(InMemoryTaskRepository):
            def list(self):
                raise StoreError("disk on fire")

        app.state.store.tasks = BrokenRepository()
        res = client.get("/api/tasks")
        assert res.status_code == 500
        body = res.json()
        assert body["error"] == "StoreError"
        assert "disk on fire" not in body["message"]


class TestUpdateTask:
    def test_patch_changes_only_supplied_fields(self, client):
        created = client.post(
            "/api/tasks",
            json=create_task_payload(title="Partial", description="X", priority="low", due_date="2030-01-01", category="home"),
        ).json()

        res = client.patch(f"/api/tasks/{created['id']}", json={"title": "Partial Updated", "completed": True})
        assert res.status_code == 200
        patched = res.json()
        assert patched["title"] == "Partial Updated"
        assert patched["completed"] is True
        for unchanged in ("id", "createdAt", "description", "priority", "dueDate", "category"):
            assert patched[unchanged] == created[unchanged]

    def test_patch_cannot_change_id_or_created_at(self, client):
        created = client.post("/api/tasks", json=create_task_payload()).json()
        res = client.patch(
            f"/api/tasks/{created['id']}",
            json={"id": "hijack", "createdAt": "1999-01-01T00:00:00", "priority": "high"},
        )
        assert res.status_code == 200
        patched = res.json()
        assert patched["id"] == created["id"]
        assert patched["createdAt"] == created["createdAt"]
        assert patched["priority"] == "high"

    def test_patch_null_due_date_clears_it(self, client):
        created = client.post("/api/tasks", json=create_task_payload(due_date="2030-01-01")).json()
        patched = client.patch(f"/api/tasks/{created['id']}", json={"dueDate": None}).json()
        assert patched["dueDate"] is None

    def test_patch_null_title_leaves_title_alone(self, client):
        created = client.post("/api/tasks", json=create_task_payload(title="Keep me")).json()
        patched = client.patch(f"/api/tasks/{created['id']}", json={"title": None}).json()
        assert patched["title"] == "Keep me"

    def test_patch_blank_category_leaves_category_alone(self, client):
        created = client.post("/api/tasks", json=create_task_payload(category="work")).json()
        patched = client.patch(f"/api/tasks/{created['id']}", json={"category": "  ", "completed": True}).json()
        assert patched["category"] == "work"
        assert patched["completed"] is True

    def test_patch_blank_title_is_rejected(self, client):
        created = client.post("/api/tasks", json=create_task_payload(title="Keep me")).json()
        res = client.patch(f"/api/tasks/{created['id']}", json={"title": "   "})
        assert res.status_code == 400
        assert res.json()["error"] == "ValidationError"
        assert client.get(f"/api/tasks/{created['id']}").json()["title"] == "Keep me"

    def test_patch_missing_task(self, client):
        res = client.patch("/api/tasks/123456", json={"title": "Nope"})
        assert res.status_code == 404
        assert res.json() == {"error": "NotFoundError", "message": "Task not found"}

    def test_last_write_wins(self, client):
        created = client.post("/api/tasks", json=create_task_payload()).json()
        client.patch(f"/api/tasks/{created['id']}", json={"priority": "low"})
        client.patch(f"/api/tasks/{created['id']}", json={"priority": "high"})
        assert client.get(f"/api/tasks/{created['id']}").json()["priority"] == "high"


class TestDeleteTask:
    def test_delete_task(self, client):
        tid = client.post("/api/tasks", json=create_task_payload(title="ToDelete")).json()["id"]

        res = client.delete(f"/api/tasks/{tid}")
        assert res.status_code == 200
        assert res.json() == {"message": "Task deleted"}

        assert client.get(f"/api/tasks/{tid}").status_code == 404
        assert client.get("/api/tasks").json() == []

        res_again = client.delete(f"/api/tasks/{tid}")
        assert res_again.status_code == 404
        assert res_again.json()["error"] == "NotFoundError"


class TestSQLiteBackend:
    def test_crud_against_sqlite(self, sqlite_client):
        assert sqlite_client.get("/health").json()["backend"] == "sqlite"

        created = sqlite_client.post(
            "/api/tasks", json=create_task_payload(title="Persist", priority="high", due_date="2031-02-03")
        ).json()
        assert_task_shape(created)
        assert sqlite_client.get("/api/tasks").json() == [created]

        patched = sqlite_client.patch(f"/api/tasks/{created['id']}", json={"completed": True, "dueDate": None}).json()
        assert patched["completed"] is True
        assert patched["dueDate"] is None
        assert patched["createdAt"] == created["createdAt"]
        assert patched["priority"] == "high"

        assert sqlite_client.delete(f"/api/tasks/{created['id']}").status_code == 200
        assert sqlite_client.delete(f"/api/tasks/{created['id']}").status_code == 404
