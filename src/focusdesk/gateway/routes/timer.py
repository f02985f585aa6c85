"""专注计时器路由

GET  /api/timer: 当前快照
POST /api/timer/start | /pause | /reset: 状态切换，返回最新快照
PUT  /api/timer/durations: 调整专注/休息时长（小于 1 的值按 1 处理）
"""

from fastapi import APIRouter, Depends
from focusdesk.core.models import TimerSnapshot
from pydantic import BaseModel, Field

from ..deps import get_workspace
from ..services.workspace import Workspace

router = APIRouter()


class DurationsRequest(BaseModel):
    """时长调整请求体（分钟）"""

    focus_minutes: int | None = Field(default=None, description="专注时长")
    break_minutes: int | None = Field(default=None, description="休息时长")


@router.get("/api/timer", response_model=TimerSnapshot)
async def get_timer(workspace: Workspace = Depends(get_workspace)):
    """计时器快照"""
    return workspace.timer.snapshot()


@router.post("/api/timer/start", response_model=TimerSnapshot)
async def start_timer(workspace: Workspace = Depends(get_workspace)):
    """开始/继续；已在运行时不变"""
    return await workspace.timer.start()


@router.post("/api/timer/pause", response_model=TimerSnapshot)
async def pause_timer(workspace: Workspace = Depends(get_workspace)):
    """暂停；已暂停时不变"""
    return await workspace.timer.pause()


@router.post("/api/timer/reset", response_model=TimerSnapshot)
async def reset_timer(workspace: Workspace = Depends(get_workspace)):
    """重置当前阶段"""
    return await workspace.timer.reset()


@router.put("/api/timer/durations", response_model=TimerSnapshot)
async def set_durations(
    body: DurationsRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """调整时长；仅对空闲中的同一阶段立即生效"""
    return await workspace.timer.set_durations(
        focus_minutes=body.focus_minutes,
        break_minutes=body.break_minutes,
    )
