"""TimerService -- 计时器 + tick 源的组合

用户操作（start/pause/reset/调整时长）与 tick 投递共用 IntervalTicker.lock，
一次只处理一个事件，处理完成后才接受下一个。
"""

import structlog
from focusdesk.core.models import TimerConfig, TimerPhase, TimerSnapshot
from focusdesk.core.notifications import Notifier
from focusdesk.core.ticker import IntervalTicker
from focusdesk.core.timer import PHASE_COMPLETE_MESSAGES, CountdownTimer

log = structlog.get_logger()


class TimerService:
    """单个 owner 的专注计时服务"""

    def __init__(
        self,
        notifier: Notifier,
        config: TimerConfig | None = None,
        tick_interval_s: float = 1.0,
    ) -> None:
        self._notifier = notifier
        self._timer = CountdownTimer(config, on_phase_complete=self._on_phase_complete)
        self._ticker = IntervalTicker(
            self._tick, interval_s=tick_interval_s, on_error=self._on_tick_error
        )

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    @property
    def ticking(self) -> bool:
        return self._ticker.armed

    def snapshot(self) -> TimerSnapshot:
        return self._timer.snapshot()

    async def start(self) -> TimerSnapshot:
        """开始/继续当前阶段"""
        async with self._ticker.lock:
            if self._timer.start():
                self._ticker.arm()
            return self._timer.snapshot()

    async def pause(self) -> TimerSnapshot:
        """暂停，立即卸载 tick 源"""
        async with self._ticker.lock:
            self._timer.pause()
            self._ticker.disarm()
            return self._timer.snapshot()

    async def reset(self) -> TimerSnapshot:
        """重置当前阶段，立即卸载 tick 源"""
        async with self._ticker.lock:
            self._timer.reset()
            self._ticker.disarm()
            return self._timer.snapshot()

    async def set_durations(
        self,
        focus_minutes: int | None = None,
        break_minutes: int | None = None,
    ) -> TimerSnapshot:
        """调整专注/休息时长（各自至少 1 分钟）"""
        async with self._ticker.lock:
            if focus_minutes is not None:
                self._timer.set_focus_duration(focus_minutes)
            if break_minutes is not None:
                self._timer.set_break_duration(break_minutes)
            return self._timer.snapshot()

    async def shutdown(self) -> None:
        """停止 tick 循环"""
        await self._ticker.close()

    def _tick(self) -> bool:
        return self._timer.tick()

    def _on_tick_error(self, error: Exception) -> None:
        """tick 失败后 tick 源已停止：暂停计时器，避免 is_running 与 tick 源不一致"""
        self._timer.pause()
        log.warning("timer_stopped_on_error", error_type=type(error).__name__)
        self._notifier.error("Timer stopped unexpectedly")

    def _on_phase_complete(self, finished: TimerPhase, snapshot: TimerSnapshot) -> None:
        log.info(
            "timer_phase_notified",
            finished=finished,
            sessions_completed=snapshot.sessions_completed,
        )
        self._notifier.success(PHASE_COMPLETE_MESSAGES[finished])
