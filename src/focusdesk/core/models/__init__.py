"""FocusDesk Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    PRIORITY_RANK,
    STATUS_CYCLE,
    SortField,
    SortOrder,
    TaskPriority,
    TaskStatus,
    TimerPhase,
    next_status,
)
from .notification import Notification, NotificationLevel
from .task import Task, TaskDraft, TaskPatch, TaskQuery, TaskStats
from .timer import TimerConfig, TimerSnapshot

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "SortField",
    "SortOrder",
    "TimerPhase",
    # 状态循环
    "STATUS_CYCLE",
    "PRIORITY_RANK",
    "next_status",
    # Task
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskQuery",
    "TaskStats",
    # Timer
    "TimerConfig",
    "TimerSnapshot",
    # Notification
    "Notification",
    "NotificationLevel",
]
