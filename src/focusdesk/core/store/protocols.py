"""Store Protocol 接口定义

定义 TaskRecordStore 的抽象接口（远端持久化协作方），
使用 Python Protocol 实现结构化子类型（duck typing）。
所有实现在失败时抛出 PersistenceError。
"""

from typing import Protocol

from ..models.task import Task


class TaskRecordStore(Protocol):
    """Task 持久化接口"""

    async def create_record(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def update_record(self, task: Task) -> None:
        """以本地最新状态覆盖任务记录"""
        ...

    async def delete_record(self, task_id: str) -> None:
        """删除任务记录"""
        ...

    async def list_records(self, owner_id: str) -> list[Task]:
        """查询指定 owner 的全部任务，按创建顺序返回"""
        ...

    async def ping(self) -> bool:
        """检查存储是否可用（不抛异常）"""
        ...

    async def close(self) -> None:
        """释放连接"""
        ...
