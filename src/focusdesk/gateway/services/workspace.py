"""Workspace -- 每个 owner 的显式应用状态

取代全局会话状态：TaskCollection、TaskService、TimerService 与 Notifier
按 owner_id 组合，首次访问时创建并从存储加载一次。
"""

import asyncio

import structlog
from focusdesk.core.collection import TaskCollection
from focusdesk.core.config import AppConfig
from focusdesk.core.models import TimerConfig
from focusdesk.core.notifications import NotificationHub, Notifier
from focusdesk.core.store.protocols import TaskRecordStore

from .task_service import TaskService
from .timer_service import TimerService

log = structlog.get_logger()


class Workspace:
    """单个 owner 的状态组合"""

    def __init__(
        self,
        owner_id: str,
        store: TaskRecordStore,
        notifier: Notifier,
        timer_config: TimerConfig,
        tick_interval_s: float = 1.0,
    ) -> None:
        self.owner_id = owner_id
        self.notifier = notifier
        self.collection = TaskCollection(owner_id)
        self.tasks = TaskService(self.collection, store, notifier)
        self.timer = TimerService(notifier, timer_config, tick_interval_s)

    async def close(self) -> None:
        await self.tasks.drain()
        await self.timer.shutdown()


class WorkspaceRegistry:
    """按 owner_id 懒加载 Workspace"""

    def __init__(
        self,
        store: TaskRecordStore,
        hub: NotificationHub,
        config: AppConfig,
    ) -> None:
        self._store = store
        self._hub = hub
        self._config = config
        self._workspaces: dict[str, Workspace] = {}
        # 首次加载按 owner 串行化；不同 owner 之间互不阻塞
        self._loading: dict[str, asyncio.Lock] = {}

    def __contains__(self, owner_id: object) -> bool:
        return owner_id in self._workspaces

    async def get(self, owner_id: str) -> Workspace:
        """获取（必要时创建并加载）owner 的 Workspace

        已加载的 Workspace 直接返回，不等待任何锁。
        """
        workspace = self._workspaces.get(owner_id)
        if workspace is not None:
            return workspace

        lock = self._loading.setdefault(owner_id, asyncio.Lock())
        async with lock:
            workspace = self._workspaces.get(owner_id)
            if workspace is None:
                workspace = Workspace(
                    owner_id=owner_id,
                    store=self._store,
                    notifier=self._hub.for_owner(owner_id),
                    timer_config=TimerConfig(
                        focus_minutes=self._config.focus_minutes,
                        break_minutes=self._config.break_minutes,
                    ),
                    tick_interval_s=self._config.tick_interval_s,
                )
                await workspace.tasks.refresh()
                self._workspaces[owner_id] = workspace
                log.info("workspace_opened", owner_id=owner_id)
        self._loading.pop(owner_id, None)
        return workspace

    async def close(self) -> None:
        """关闭所有 Workspace：等待远端写入完成并停止计时器"""
        workspaces = list(self._workspaces.values())
        self._workspaces.clear()
        for workspace in workspaces:
            await workspace.close()
