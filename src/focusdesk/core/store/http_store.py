"""HttpTaskRecordStore -- 托管 BaaS 的 REST 调用封装

远端暴露 PostgREST 风格的 /rest/v1/tasks 资源：
- 鉴权：apikey 头 + Bearer token
- 过滤：?owner_id=eq.<id>、?task_id=eq.<id>
所有 httpx 异常与非 2xx 响应统一包装为 PersistenceError。
"""

import httpx
import structlog

from ..exceptions import PersistenceError
from ..models.task import Task

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

TASKS_RESOURCE = "/rest/v1/tasks"


class HttpTaskRecordStore:
    """远端 BaaS 任务存储"""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url: BaaS 基础 URL
            api_key: BaaS 访问密钥
            timeout_s: 请求超时（秒）
            client: 可注入的 httpx.AsyncClient（测试用 MockTransport）
        """
        self._base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout_s,
        )
        if client is not None:
            self._client.headers.update(headers)

    async def _request(self, action: str, method: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, TASKS_RESOURCE, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            log.warning(
                "baas_request_failed",
                action=action,
                method=method,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise PersistenceError(action, e) from e

    async def create_record(self, task: Task) -> None:
        """POST 新记录"""
        await self._request(
            "create",
            "POST",
            json=task.model_dump(mode="json"),
            headers={"Prefer": "return=minimal"},
        )

    async def update_record(self, task: Task) -> None:
        """PATCH 覆盖可变字段

        请求返回受影响的行；没有匹配记录时视为失败（与 SQLite 实现一致）。
        """
        payload = task.model_dump(
            mode="json",
            include={"title", "description", "status", "priority", "due_date", "updated_at"},
        )
        response = await self._request(
            "update",
            "PATCH",
            params={"task_id": f"eq.{task.task_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        try:
            rows = response.json()
        except ValueError as e:
            raise PersistenceError("update", e) from e
        if not rows:
            log.warning("baas_update_no_match", task_id=task.task_id)
            raise PersistenceError("update", LookupError(f"no record for {task.task_id}"))

    async def delete_record(self, task_id: str) -> None:
        """DELETE 指定记录"""
        await self._request("delete", "DELETE", params={"task_id": f"eq.{task_id}"})

    async def list_records(self, owner_id: str) -> list[Task]:
        """GET 指定 owner 的记录，按 created_at 升序"""
        response = await self._request(
            "list",
            "GET",
            params={"owner_id": f"eq.{owner_id}", "order": "created_at.asc", "select": "*"},
        )
        try:
            return [Task.model_validate(row) for row in response.json()]
        except ValueError as e:
            # JSON 解析失败或记录不符合 Task 模型
            raise PersistenceError("list", e) from e

    async def ping(self) -> bool:
        """检查 BaaS 可达性；不抛出异常"""
        try:
            response = await self._client.get(
                TASKS_RESOURCE,
                params={"limit": "1"},
                timeout=HEALTH_CHECK_TIMEOUT_S,
            )
            return response.status_code < 500
        except Exception as e:
            log.debug("baas_ping_failed", url=self._base_url, error=str(e))
            return False

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
