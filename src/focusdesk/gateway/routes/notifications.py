"""通知路由

GET /api/notifications: 当前 owner 最近的通知
GET /api/stream/notifications: SSE 实时推送通知，带心跳保活
"""

import asyncio

from fastapi import APIRouter, Depends
from focusdesk.core.config import SSE_HEARTBEAT_INTERVAL
from focusdesk.core.models import Notification
from focusdesk.core.notifications import NotificationHub
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from ..deps import get_notification_hub, get_owner_id

router = APIRouter()


class NotificationListResponse(BaseModel):
    """通知列表响应"""

    notifications: list[Notification]


def _notification_to_sse(notification: Notification) -> dict:
    """将 Notification 转换为 SSE 事件"""
    return {
        "id": notification.notification_id,
        "event": notification.level.value,
        "data": notification.model_dump_json(),
    }


@router.get("/api/notifications", response_model=NotificationListResponse)
async def list_notifications(
    owner_id: str = Depends(get_owner_id),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """最近的通知（旧 -> 新）"""
    return NotificationListResponse(notifications=hub.recent(owner_id))


@router.get("/api/stream/notifications")
async def stream_notifications(
    owner_id: str = Depends(get_owner_id),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """SSE 通知流端点"""

    async def event_generator():
        queue = hub.subscribe(owner_id)
        try:
            while True:
                try:
                    notification = await asyncio.wait_for(
                        queue.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                    yield _notification_to_sse(notification)
                except TimeoutError:
                    yield {"comment": "heartbeat"}
        finally:
            hub.unsubscribe(owner_id, queue)

    return EventSourceResponse(event_generator())
