"""Task Domain Model

Task 由 TaskCollection 独占持有；模型为 frozen，
所有修改都通过 collection 生成新实例并替换。
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import SortField, SortOrder, TaskPriority, TaskStatus


def _as_aware(value: datetime | None) -> datetime | None:
    """naive datetime 视为 UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Task(BaseModel):
    """Task 数据模型

    不变量：task_id 在 collection 内唯一；updated_at >= created_at。
    """

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(description="唯一标识，ULID 格式")
    owner_id: str = Field(default="owner", description="所属用户标识")
    title: str = Field(min_length=1, description="任务标题")
    description: str = Field(default="", description="任务描述，可为空")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    due_date: datetime | None = Field(default=None, description="截止时间，None 表示无截止")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_aware(value)


class TaskDraft(BaseModel):
    """创建任务时提交的字段

    title 的非空校验由 TaskCollection.create 负责，
    以便统一抛出 TaskValidationError。
    """

    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def _ensure_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_aware(value)


class TaskPatch(BaseModel):
    """编辑任务时提交的字段（仅合并显式提供的字段）

    due_date 显式传 None 表示清除截止时间；
    其余字段传 None 等同于未提供。
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def _ensure_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_aware(value)

    def changes(self) -> dict[str, Any]:
        """返回需要合并到 Task 的字段"""
        provided = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in provided.items()
            if value is not None or key == "due_date"
        }


class TaskQuery(BaseModel):
    """列表筛选/排序条件（不持久化）"""

    search_query: str = Field(default="", description="标题/描述的大小写不敏感子串")
    sort_field: SortField = Field(default=SortField.PRIORITY, description="排序字段")
    sort_order: SortOrder = Field(default=SortOrder.DESC, description="排序方向")


class TaskStats(BaseModel):
    """按状态汇总的任务计数"""

    total: int = 0
    pending: int = 0
    ongoing: int = 0
    completed: int = 0
