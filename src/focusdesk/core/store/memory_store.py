"""TaskRecordStore 的内存实现（本地运行与测试使用）"""

from ..exceptions import PersistenceError
from ..models.task import Task


class MemoryTaskRecordStore:
    """dict 存储，保持插入顺序"""

    def __init__(self) -> None:
        self._records: dict[str, Task] = {}

    async def create_record(self, task: Task) -> None:
        if task.task_id in self._records:
            raise PersistenceError("create", KeyError(task.task_id))
        self._records[task.task_id] = task

    async def update_record(self, task: Task) -> None:
        if task.task_id not in self._records:
            raise PersistenceError("update", LookupError(f"no record for {task.task_id}"))
        self._records[task.task_id] = task

    async def delete_record(self, task_id: str) -> None:
        self._records.pop(task_id, None)

    async def list_records(self, owner_id: str) -> list[Task]:
        return [t for t in self._records.values() if t.owner_id == owner_id]

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
