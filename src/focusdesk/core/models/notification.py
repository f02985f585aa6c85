"""Notification 模型 -- 推送给展示层的非阻塞提示"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class NotificationLevel(StrEnum):
    """提示级别"""

    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """单条提示消息"""

    notification_id: str = Field(description="唯一标识，ULID 格式")
    owner_id: str = Field(description="接收者标识")
    level: NotificationLevel
    message: str
    ts: datetime
