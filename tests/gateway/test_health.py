"""健康检查测试

测试内容：
1. GET /health 返回 200 + ok
2. GET /ready 正常时返回 200 + checks 结构
3. GET /ready 存储不可用时返回 503
"""

from httpx import AsyncClient


class TestHealthCheck:
    async def test_health_returns_200(self, client: AsyncClient):
        """GET /health 永远返回 200"""
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_ready_returns_200(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"task_store": "ok", "store_mode": "sqlite"}

    async def test_ready_store_failure(self, client: AsyncClient, test_app):
        """存储连接关闭后返回 503"""
        await test_app.state.task_store.close()

        resp = await client.get("/ready")

        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["task_store"] == "unreachable"

    async def test_request_id_header(self, client: AsyncClient):
        resp = await client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 26
