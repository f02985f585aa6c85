"""gateway 测试配置 -- FastAPI app + httpx AsyncClient

ASGITransport 不触发 lifespan，因此在 fixture 中手动初始化 app.state。
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from focusdesk.core.config import AppConfig
from focusdesk.core.notifications import NotificationHub
from focusdesk.core.store.sqlite_store import SqliteTaskRecordStore
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """创建测试用 FastAPI app 实例（SQLite 临时库）"""
    db_path = tmp_path / "sqlite" / "test.db"
    os.environ["FOCUSDESK_DB_PATH"] = str(db_path)
    os.environ["FOCUSDESK_LOG_LEVEL"] = "WARNING"

    from focusdesk.gateway.main import create_app
    from focusdesk.gateway.services.workspace import WorkspaceRegistry

    app = create_app()

    # 手动初始化（绕过 lifespan）
    config = AppConfig(db_path=str(db_path), tick_interval_s=0.01)
    store = await SqliteTaskRecordStore.open(db_path)
    hub = NotificationHub()
    app.state.app_config = config
    app.state.task_store = store
    app.state.notification_hub = hub
    app.state.workspaces = WorkspaceRegistry(store, hub, config)

    yield app

    await app.state.workspaces.close()
    await store.close()
    os.environ.pop("FOCUSDESK_DB_PATH", None)
    os.environ.pop("FOCUSDESK_LOG_LEVEL", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
