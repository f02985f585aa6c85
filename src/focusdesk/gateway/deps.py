"""依赖注入模块 -- 通过 FastAPI Depends 注入共享实例

共享实例通过 app.state 管理，在 lifespan 中初始化/清理。
当前 owner 由 X-Owner-ID 请求头注入（鉴权不在本服务范围内）。
"""

from fastapi import Header, Request
from focusdesk.core.config import DEFAULT_OWNER_ID
from focusdesk.core.notifications import NotificationHub

from .services.workspace import Workspace


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """从请求头获取 owner_id，缺省为默认 owner"""
    owner_id = (x_owner_id or "").strip()
    return owner_id or DEFAULT_OWNER_ID


async def get_workspace(
    request: Request,
    x_owner_id: str | None = Header(default=None),
) -> Workspace:
    """获取当前 owner 的 Workspace"""
    return await request.app.state.workspaces.get(get_owner_id(x_owner_id))


def get_notification_hub(request: Request) -> NotificationHub:
    """从 app.state 获取 NotificationHub 实例"""
    return request.app.state.notification_hub
