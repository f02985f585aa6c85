"""枚举定义

包含 TaskStatus 状态循环、TaskPriority 优先级、排序字段/方向、计时器阶段，
以及 STATUS_CYCLE 状态推进映射和 PRIORITY_RANK 优先级序数。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态"""

    PENDING = "pending"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """Task 优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SortField(StrEnum):
    """任务列表排序字段"""

    TITLE = "title"
    PRIORITY = "priority"
    DUE_DATE = "due_date"


class SortOrder(StrEnum):
    """排序方向"""

    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        """切换升序/降序"""
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


class TimerPhase(StrEnum):
    """计时器阶段"""

    FOCUS = "focus"
    BREAK = "break"


# 状态推进：pending -> ongoing -> completed -> pending
STATUS_CYCLE: dict[TaskStatus, TaskStatus] = {
    TaskStatus.PENDING: TaskStatus.ONGOING,
    TaskStatus.ONGOING: TaskStatus.COMPLETED,
    TaskStatus.COMPLETED: TaskStatus.PENDING,
}

# 优先级排序序数（数值越大越优先）
PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def next_status(status: TaskStatus) -> TaskStatus:
    """返回状态循环中的下一个状态

    Args:
        status: 当前状态

    Returns:
        下一个状态（completed 之后回到 pending）
    """
    return STATUS_CYCLE[TaskStatus(status)]
