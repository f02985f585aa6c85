"""FocusDesk Core Store -- 任务持久化实现

提供工厂函数按配置创建 TaskRecordStore 实例。
"""

from ..config import AppConfig
from .http_store import HttpTaskRecordStore
from .memory_store import MemoryTaskRecordStore
from .protocols import TaskRecordStore
from .sqlite_init import init_db
from .sqlite_store import SqliteTaskRecordStore


async def create_task_store(config: AppConfig) -> TaskRecordStore:
    """根据 store_mode 创建存储实例

    Args:
        config: 应用配置

    Returns:
        TaskRecordStore 实现
    """
    if config.store_mode == "http":
        return HttpTaskRecordStore(
            base_url=config.baas_url,
            api_key=config.baas_key.get_secret_value(),
            timeout_s=config.baas_timeout_s,
        )
    if config.store_mode == "memory":
        return MemoryTaskRecordStore()
    return await SqliteTaskRecordStore.open(config.db_path)


__all__ = [
    "TaskRecordStore",
    "create_task_store",
    "SqliteTaskRecordStore",
    "HttpTaskRecordStore",
    "MemoryTaskRecordStore",
    "init_db",
]
