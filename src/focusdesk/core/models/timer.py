"""计时器配置与快照模型"""

from pydantic import BaseModel, Field

from .enums import TimerPhase


class TimerConfig(BaseModel):
    """专注/休息时长配置（分钟）"""

    focus_minutes: int = Field(default=25, ge=1, description="专注时长")
    break_minutes: int = Field(default=5, ge=1, description="休息时长")


class TimerSnapshot(BaseModel):
    """计时器只读快照 -- 供展示层使用"""

    phase: TimerPhase
    remaining_seconds: int = Field(ge=0)
    clock: str = Field(description="MM:SS 格式的剩余时间")
    progress_fraction: float = Field(ge=0.0, le=1.0)
    is_running: bool
    sessions_completed: int = Field(ge=0)
    focus_minutes: int = Field(ge=1)
    break_minutes: int = Field(ge=1)
