"""TaskService -- 任务增删改查业务逻辑

乐观更新策略：
1. 先修改内存中的 TaskCollection
2. 立即发送成功提示
3. 在后台调度远端写入（不阻塞调用方）
4. 远端写入失败：记录日志 + 错误提示；本地修改不回滚、不重试，
   本地状态可能与远端不一致，直到下一次 refresh()
"""

import asyncio
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager

import structlog
from focusdesk.core.collection import TaskCollection
from focusdesk.core.exceptions import (
    FocusDeskError,
    PersistenceError,
    TaskValidationError,
)
from focusdesk.core.models import (
    SortField,
    SortOrder,
    Task,
    TaskDraft,
    TaskPatch,
    TaskStats,
)
from focusdesk.core.notifications import Notifier
from focusdesk.core.store.protocols import TaskRecordStore

log = structlog.get_logger()


class TaskService:
    """任务业务服务（单个 owner）"""

    def __init__(
        self,
        collection: TaskCollection,
        store: TaskRecordStore,
        notifier: Notifier,
    ) -> None:
        self._collection = collection
        self._store = store
        self._notifier = notifier
        self._pending: set[asyncio.Task] = set()
        # 串行化远端写入，保持用户可见修改的先后顺序
        self._write_lock = asyncio.Lock()

    @property
    def owner_id(self) -> str:
        return self._collection.owner_id

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def refresh(self) -> bool:
        """从远端重新加载全部任务

        Returns:
            True 表示加载成功；失败时保留当前内存状态
        """
        await self.drain()
        try:
            records = await self._store.list_records(self.owner_id)
            self._collection.replace_all(records)
        except (PersistenceError, TaskValidationError) as e:
            log.warning(
                "task_refresh_failed",
                owner_id=self.owner_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            self._notifier.error("Failed to load tasks")
            return False

        log.info("task_refresh_completed", owner_id=self.owner_id, total=len(records))
        return True

    async def create_task(self, draft: TaskDraft) -> Task:
        """创建任务

        Raises:
            TaskValidationError: 标题为空
        """
        with self._reporting("create"):
            task = self._collection.create(draft)
        self._notifier.success("Task created successfully")
        self._schedule_write("create", task.task_id, self._store.create_record(task))
        return task

    async def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        """编辑任务

        Raises:
            TaskNotFoundError: task_id 不存在
            TaskValidationError: 标题被改为空
        """
        with self._reporting("update", task_id):
            task = self._collection.update(task_id, patch)
        self._notifier.success("Task updated successfully")
        self._schedule_write("update", task_id, self._store.update_record(task))
        return task

    async def advance_status(self, task_id: str) -> Task:
        """状态推进 pending -> ongoing -> completed -> pending

        Raises:
            TaskNotFoundError: task_id 不存在
        """
        with self._reporting("update", task_id):
            task = self._collection.advance_status(task_id)
        self._notifier.success(f"Task marked as {task.status.value}")
        self._schedule_write("update", task_id, self._store.update_record(task))
        return task

    async def delete_task(self, task_id: str) -> Task:
        """删除任务

        Raises:
            TaskNotFoundError: task_id 不存在
        """
        with self._reporting("delete", task_id):
            task = self._collection.delete(task_id)
        self._notifier.success("Task deleted")
        self._schedule_write("delete", task_id, self._store.delete_record(task_id))
        return task

    def get_task(self, task_id: str) -> Task:
        """查询任务详情"""
        return self._collection.get(task_id)

    def query(
        self,
        search_query: str = "",
        sort_field: SortField = SortField.PRIORITY,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> list[Task]:
        """筛选 + 排序后的任务列表"""
        return self._collection.query(search_query, sort_field, sort_order)

    def stats(self) -> TaskStats:
        """按状态汇总"""
        return self._collection.aggregate()

    async def drain(self) -> None:
        """等待所有已调度的远端写入完成"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @contextmanager
    def _reporting(self, action: str, task_id: str | None = None) -> Iterator[None]:
        """本地操作失败时发送错误提示后继续抛出"""
        try:
            yield
        except FocusDeskError as e:
            log.info(
                "task_operation_rejected",
                action=action,
                owner_id=self.owner_id,
                task_id=task_id,
                error_type=type(e).__name__,
            )
            self._notifier.error(e.message)
            raise

    def _schedule_write(self, action: str, task_id: str, write: Awaitable[None]) -> None:
        """后台调度远端写入（fire-and-forget，但保留引用以便 drain）"""
        bg = asyncio.create_task(self._persist(action, task_id, write))
        self._pending.add(bg)
        bg.add_done_callback(self._pending.discard)

    async def _persist(self, action: str, task_id: str, write: Awaitable[None]) -> None:
        async with self._write_lock:
            try:
                await write
            except PersistenceError as e:
                log.warning(
                    "task_persist_failed",
                    action=action,
                    task_id=task_id,
                    owner_id=self.owner_id,
                    error_type=type(e.original_error).__name__,
                )
                self._notifier.error(f"Failed to {action} task; local changes are kept")
            except Exception as e:
                log.error(
                    "task_persist_unexpected_error",
                    action=action,
                    task_id=task_id,
                    error_type=type(e).__name__,
                )
                self._notifier.error(f"Failed to {action} task; local changes are kept")
            else:
                log.debug("task_persisted", action=action, task_id=task_id)
