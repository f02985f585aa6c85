"""FastAPI 应用主文件

app 创建 + lifespan 管理：存储初始化/关闭 + 通知中心 + Workspace 注册表 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from focusdesk import __version__
from focusdesk.core.config import NOTIFICATION_HISTORY_SIZE, load_app_config
from focusdesk.core.notifications import NotificationHub
from focusdesk.core.store import create_task_store

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, notifications, tasks, timer
from .services.workspace import WorkspaceRegistry

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化存储，关闭时等待写入完成并释放连接"""
    config = load_app_config()
    app.state.app_config = config

    task_store = await create_task_store(config)
    app.state.task_store = task_store

    hub = NotificationHub(history_size=NOTIFICATION_HISTORY_SIZE)
    app.state.notification_hub = hub
    app.state.workspaces = WorkspaceRegistry(task_store, hub, config)

    log.info(
        "gateway_started",
        store_mode=config.store_mode,
        focus_minutes=config.focus_minutes,
        break_minutes=config.break_minutes,
    )

    yield

    # 关闭：停止计时器、等待后台写入，再关闭存储
    await app.state.workspaces.close()
    await task_store.close()
    log.info("gateway_stopped")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="FocusDesk Gateway",
        version=__version__,
        description="个人任务管理与专注计时 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(timer.router, tags=["timer"])
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
