"""任务 API 测试

测试内容：
1. POST /api/tasks 创建（201）与空标题拒绝（422）
2. GET /api/tasks 搜索 + 排序 + 汇总
3. PATCH / advance / DELETE 与 404 错误格式
4. X-Owner-ID 之间隔离
5. 写入最终落到存储
"""

from datetime import datetime

from httpx import AsyncClient


async def _create(client: AsyncClient, **body) -> dict:
    resp = await client.post("/api/tasks", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateTask:
    async def test_create_returns_201(self, client: AsyncClient):
        data = await _create(
            client,
            title="Ship report",
            priority="high",
            due_date="2025-01-10T00:00:00Z",
        )
        assert len(data["task_id"]) == 26
        assert data["title"] == "Ship report"
        assert data["status"] == "pending"
        assert data["priority"] == "high"
        assert data["owner_id"] == "owner"
        assert data["due_label"] == "Jan 10, 2025"
        assert data["created_at"] == data["updated_at"]

    async def test_blank_title_rejected(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"title": "   "})
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["code"] == "TASK_INVALID"
        assert error["message"] == "Task title must not be empty"

    async def test_invalid_priority_rejected(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"title": "x", "priority": "urgent"})
        assert resp.status_code == 422

    async def test_success_notification_recorded(self, client: AsyncClient):
        await _create(client, title="A")
        resp = await client.get("/api/notifications")
        messages = [n["message"] for n in resp.json()["notifications"]]
        assert "Task created successfully" in messages


class TestListTasks:
    async def test_search_and_sort(self, client: AsyncClient):
        await _create(client, title="Ship report", priority="high")
        await _create(client, title="Clean desk", priority="low")
        await _create(client, title="Report bug", priority="low")

        resp = await client.get("/api/tasks", params={"q": "report", "sort": "priority"})
        assert resp.status_code == 200
        data = resp.json()
        assert [t["title"] for t in data["tasks"]] == ["Ship report", "Report bug"]
        # 汇总基于全量任务，不受搜索影响
        assert data["stats"]["total"] == 3
        assert data["stats"]["pending"] == 3

    async def test_sort_title_asc(self, client: AsyncClient):
        for title in ["banana", "Apple", "cherry"]:
            await _create(client, title=title)
        resp = await client.get("/api/tasks", params={"sort": "title", "order": "asc"})
        assert [t["title"] for t in resp.json()["tasks"]] == ["Apple", "banana", "cherry"]

    async def test_invalid_sort_field(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"sort": "color"})
        assert resp.status_code == 422

    async def test_stats_endpoint(self, client: AsyncClient):
        task = await _create(client, title="A")
        await _create(client, title="B")
        await client.post(f"/api/tasks/{task['task_id']}/advance")

        resp = await client.get("/api/tasks/stats")
        assert resp.json() == {"total": 2, "pending": 1, "ongoing": 1, "completed": 0}


class TestModifyTask:
    async def test_get_task(self, client: AsyncClient):
        task = await _create(client, title="A")
        resp = await client.get(f"/api/tasks/{task['task_id']}")
        assert resp.status_code == 200
        assert resp.json()["title"] == "A"

    async def test_patch_merges_fields(self, client: AsyncClient):
        task = await _create(client, title="Draft", description="notes", priority="low")
        resp = await client.patch(
            f"/api/tasks/{task['task_id']}", json={"title": "Final", "priority": "high"}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Final"
        assert data["priority"] == "high"
        assert data["description"] == "notes"
        assert data["created_at"] == task["created_at"]
        assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(
            task["updated_at"]
        )

    async def test_patch_clears_due_date(self, client: AsyncClient):
        task = await _create(client, title="A", due_date="2025-01-10T00:00:00Z")
        resp = await client.patch(f"/api/tasks/{task['task_id']}", json={"due_date": None})
        assert resp.json()["due_date"] is None
        assert resp.json()["due_label"] is None

    async def test_patch_blank_title(self, client: AsyncClient):
        task = await _create(client, title="A")
        resp = await client.patch(f"/api/tasks/{task['task_id']}", json={"title": ""})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "TASK_INVALID"

    async def test_advance_cycle(self, client: AsyncClient):
        task = await _create(client, title="A")
        statuses = []
        for _ in range(3):
            resp = await client.post(f"/api/tasks/{task['task_id']}/advance")
            statuses.append(resp.json()["status"])
        assert statuses == ["ongoing", "completed", "pending"]

        resp = await client.get("/api/notifications")
        messages = [n["message"] for n in resp.json()["notifications"]]
        assert "Task marked as completed" in messages

    async def test_delete(self, client: AsyncClient):
        task = await _create(client, title="A")
        resp = await client.delete(f"/api/tasks/{task['task_id']}")
        assert resp.status_code == 200
        assert resp.json() == {"task_id": task["task_id"], "deleted": True}

        resp = await client.get(f"/api/tasks/{task['task_id']}")
        assert resp.status_code == 404

    async def test_not_found(self, client: AsyncClient):
        for method, path in [
            ("GET", "/api/tasks/missing"),
            ("PATCH", "/api/tasks/missing"),
            ("DELETE", "/api/tasks/missing"),
            ("POST", "/api/tasks/missing/advance"),
        ]:
            kwargs = {"json": {"title": "x"}} if method == "PATCH" else {}
            resp = await client.request(method, path, **kwargs)
            assert resp.status_code == 404, (method, path)
            error = resp.json()["error"]
            assert error["code"] == "TASK_NOT_FOUND"
            assert error["message"] == "Task with id missing does not exist"


class TestOwnerIsolation:
    async def test_owners_do_not_share_tasks(self, client: AsyncClient):
        resp = await client.post(
            "/api/tasks", json={"title": "alice task"}, headers={"X-Owner-ID": "alice"}
        )
        task_id = resp.json()["task_id"]
        assert resp.json()["owner_id"] == "alice"

        resp = await client.get("/api/tasks", headers={"X-Owner-ID": "bob"})
        assert resp.json()["tasks"] == []

        resp = await client.get(f"/api/tasks/{task_id}", headers={"X-Owner-ID": "bob"})
        assert resp.status_code == 404


class TestPersistence:
    async def test_writes_reach_store(self, client: AsyncClient, test_app):
        task = await _create(client, title="A")
        await client.patch(f"/api/tasks/{task['task_id']}", json={"description": "d"})
        await _create(client, title="B")

        workspace = await test_app.state.workspaces.get("owner")
        await workspace.tasks.drain()

        records = await test_app.state.task_store.list_records("owner")
        assert [r.title for r in records] == ["A", "B"]
        assert records[0].description == "d"
