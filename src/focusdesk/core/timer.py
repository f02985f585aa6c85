"""CountdownTimer -- 专注/休息两阶段倒计时状态机

状态 = (phase ∈ {focus, break}) × (is_running ∈ {True, False})，初始为 focus 空闲。
计时由外部 tick 驱动，不锚定墙上时钟；is_running 为 False 时 tick 不产生任何变化。

reset() 保持当前阶段，只把剩余时间恢复为当前阶段的配置时长。
"""

from collections.abc import Callable

import structlog

from .models.enums import TimerPhase
from .models.timer import TimerConfig, TimerSnapshot

log = structlog.get_logger()

PHASE_COMPLETE_MESSAGES: dict[TimerPhase, str] = {
    TimerPhase.FOCUS: "Focus session complete! Time for a break.",
    TimerPhase.BREAK: "Break complete! Ready for another focus session?",
}

PhaseCompleteCallback = Callable[[TimerPhase, TimerSnapshot], None]


def format_clock(seconds: int) -> str:
    """格式化为 MM:SS（零填充）"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class CountdownTimer:
    """可复用的专注计时器组件"""

    def __init__(
        self,
        config: TimerConfig | None = None,
        on_phase_complete: PhaseCompleteCallback | None = None,
    ) -> None:
        config = config or TimerConfig()
        self._focus_minutes = config.focus_minutes
        self._break_minutes = config.break_minutes
        self._on_phase_complete = on_phase_complete

        self.phase = TimerPhase.FOCUS
        self.is_running = False
        self.sessions_completed = 0
        # 当前阶段开始时的总秒数；保证 remaining_seconds <= phase_seconds
        self.phase_seconds = self._focus_minutes * 60
        self.remaining_seconds = self.phase_seconds

    @property
    def focus_minutes(self) -> int:
        return self._focus_minutes

    @property
    def break_minutes(self) -> int:
        return self._break_minutes

    def duration_minutes(self, phase: TimerPhase) -> int:
        """指定阶段的配置时长（分钟）"""
        return self._focus_minutes if phase is TimerPhase.FOCUS else self._break_minutes

    def _begin_phase(self, phase: TimerPhase) -> None:
        self.phase = phase
        self.phase_seconds = self.duration_minutes(phase) * 60
        self.remaining_seconds = self.phase_seconds

    @property
    def progress_fraction(self) -> float:
        """当前阶段已完成比例，范围 [0, 1]"""
        elapsed = self.phase_seconds - self.remaining_seconds
        return min(1.0, max(0.0, elapsed / self.phase_seconds))

    def start(self) -> bool:
        """idle -> running；已在运行时为 no-op

        Returns:
            状态是否发生变化
        """
        if self.is_running:
            return False
        self.is_running = True
        log.debug("timer_started", phase=self.phase, remaining=self.remaining_seconds)
        return True

    def pause(self) -> bool:
        """running -> idle，保留剩余时间；已空闲时为 no-op"""
        if not self.is_running:
            return False
        self.is_running = False
        log.debug("timer_paused", phase=self.phase, remaining=self.remaining_seconds)
        return True

    def tick(self) -> bool:
        """推进一秒

        Returns:
            True 表示本次 tick 使当前阶段结束
        """
        if not self.is_running:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.complete_phase()
            return True
        return False

    def complete_phase(self) -> None:
        """结束当前阶段并切换到另一个阶段（切换后处于空闲状态）"""
        finished = self.phase
        self.is_running = False
        if finished is TimerPhase.FOCUS:
            self.sessions_completed += 1
            self._begin_phase(TimerPhase.BREAK)
        else:
            self._begin_phase(TimerPhase.FOCUS)

        log.info(
            "timer_phase_completed",
            finished=finished,
            next_phase=self.phase,
            sessions_completed=self.sessions_completed,
        )
        if self._on_phase_complete is not None:
            self._on_phase_complete(finished, self.snapshot())

    def reset(self) -> None:
        """停止计时，剩余时间恢复为当前阶段的配置时长（不切换阶段）"""
        self.is_running = False
        self._begin_phase(self.phase)

    def set_focus_duration(self, minutes: int) -> int:
        """设置专注时长（至少 1 分钟）

        仅当当前为 focus 阶段且未运行时立即生效，否则下次进入 focus 阶段时生效。

        Returns:
            实际生效的分钟数
        """
        self._focus_minutes = max(1, int(minutes))
        if self.phase is TimerPhase.FOCUS and not self.is_running:
            self._begin_phase(TimerPhase.FOCUS)
        return self._focus_minutes

    def set_break_duration(self, minutes: int) -> int:
        """设置休息时长（至少 1 分钟），生效规则同 set_focus_duration"""
        self._break_minutes = max(1, int(minutes))
        if self.phase is TimerPhase.BREAK and not self.is_running:
            self._begin_phase(TimerPhase.BREAK)
        return self._break_minutes

    def snapshot(self) -> TimerSnapshot:
        """生成只读快照"""
        return TimerSnapshot(
            phase=self.phase,
            remaining_seconds=self.remaining_seconds,
            clock=format_clock(self.remaining_seconds),
            progress_fraction=self.progress_fraction,
            is_running=self.is_running,
            sessions_completed=self.sessions_completed,
            focus_minutes=self._focus_minutes,
            break_minutes=self._break_minutes,
        )
