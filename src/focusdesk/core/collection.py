"""TaskCollection -- 内存中的任务集合

owner_id 在构造时注入，取代全局会话状态。
所有操作同步执行；远端持久化由 TaskService 在本地修改成功后调度。
"""

from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, datetime, timedelta

import structlog
from ulid import ULID

from .exceptions import TaskNotFoundError, TaskValidationError
from .models.enums import SortField, SortOrder, TaskStatus, next_status
from .models.task import Task, TaskDraft, TaskPatch, TaskQuery, TaskStats
from .ordering import filter_and_sort

log = structlog.get_logger()

_MIN_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_task_id() -> str:
    return str(ULID())


class TaskCollection:
    """单个 owner 的任务集合

    dict 保持插入顺序，update 原位替换，因此排序的稳定性以创建顺序为准。
    """

    def __init__(
        self,
        owner_id: str,
        tasks: Iterable[Task] = (),
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        self.owner_id = owner_id
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: dict[str, Task] = {}
        self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def _now_after(self, previous: datetime | None = None) -> datetime:
        """当前时间；保证严格晚于 previous"""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        if previous is not None and now <= previous:
            now = previous + _MIN_TICK
        return now

    @staticmethod
    def _clean_title(title: str | None) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise TaskValidationError("Task title must not be empty")
        return cleaned

    def get(self, task_id: str) -> Task:
        """根据 task_id 查询任务"""
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def create(self, draft: TaskDraft) -> Task:
        """创建任务并追加到集合末尾

        Raises:
            TaskValidationError: 标题为空
        """
        title = self._clean_title(draft.title)

        task_id = self._id_factory()
        while task_id in self._tasks:
            task_id = self._id_factory()

        now = self._now_after()
        task = Task(
            task_id=task_id,
            owner_id=self.owner_id,
            title=title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            due_date=draft.due_date,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task_id] = task
        log.debug("task_created", task_id=task_id, owner_id=self.owner_id)
        return task

    def update(self, task_id: str, patch: TaskPatch) -> Task:
        """合并 patch 中显式提供的字段，刷新 updated_at

        task_id / owner_id / created_at 不会被修改。

        Raises:
            TaskNotFoundError: task_id 不存在
            TaskValidationError: 标题被改为空
        """
        current = self.get(task_id)
        changes = patch.changes()
        if "title" in changes:
            changes["title"] = self._clean_title(changes["title"])
        return self._replace(current, **changes)

    def advance_status(self, task_id: str) -> Task:
        """状态推进 pending -> ongoing -> completed -> pending

        Raises:
            TaskNotFoundError: task_id 不存在
        """
        current = self.get(task_id)
        return self._replace(current, status=next_status(current.status))

    def delete(self, task_id: str) -> Task:
        """删除任务并返回被删除的记录

        Raises:
            TaskNotFoundError: task_id 不存在（不做静默 no-op）
        """
        task = self.get(task_id)
        del self._tasks[task_id]
        log.debug("task_deleted", task_id=task_id, owner_id=self.owner_id)
        return task

    def _replace(self, current: Task, **changes) -> Task:
        data = current.model_dump()
        data.update(changes)
        data["task_id"] = current.task_id
        data["owner_id"] = current.owner_id
        data["created_at"] = current.created_at
        data["updated_at"] = self._now_after(current.updated_at)
        updated = Task.model_validate(data)
        self._tasks[current.task_id] = updated
        return updated

    def query(
        self,
        search_query: str = "",
        sort_field: SortField = SortField.PRIORITY,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> list[Task]:
        """筛选并排序，返回新的有序列表"""
        return filter_and_sort(self._tasks.values(), search_query, sort_field, sort_order)

    def query_with(self, criteria: TaskQuery) -> list[Task]:
        """使用 TaskQuery 对象查询"""
        return self.query(criteria.search_query, criteria.sort_field, criteria.sort_order)

    def aggregate(self) -> TaskStats:
        """按状态汇总计数"""
        counts = {status: 0 for status in TaskStatus}
        for task in self._tasks.values():
            counts[task.status] += 1
        return TaskStats(
            total=len(self._tasks),
            pending=counts[TaskStatus.PENDING],
            ongoing=counts[TaskStatus.ONGOING],
            completed=counts[TaskStatus.COMPLETED],
        )

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """用外部同步的记录整体替换集合

        Raises:
            TaskValidationError: 存在重复 task_id（此时集合保持不变）
        """
        incoming: dict[str, Task] = {}
        for task in tasks:
            if task.task_id in incoming:
                raise TaskValidationError(f"Duplicate task id {task.task_id}")
            incoming[task.task_id] = task
        self._tasks = incoming
