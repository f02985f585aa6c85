"""IntervalTicker -- 基于 asyncio.Task 的周期 tick 源

仅在计时器运行时装载（arm），暂停/重置/阶段结束时立即卸载（disarm）。
状态修改与 tick 投递通过同一把 asyncio.Lock 串行化；
每次 arm/disarm 都会递增 generation，sleep 结束时 generation 已过期的 tick 直接丢弃，
因此 pause 与 tick 竞争时不会出现重复扣减。
"""

import asyncio
from collections.abc import Callable

import structlog

log = structlog.get_logger()

# 回调返回 True 表示停止 tick（例如阶段结束）
TickCallback = Callable[[], bool]
# 回调抛出异常导致循环停止时调用，持有 lock
ErrorCallback = Callable[[Exception], None]


class IntervalTicker:
    """周期 tick 源"""

    def __init__(
        self,
        on_tick: TickCallback,
        interval_s: float = 1.0,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._on_tick = on_tick
        self._on_error = on_error
        self._interval_s = interval_s
        self._task: asyncio.Task | None = None
        self._generation = 0
        self.lock = asyncio.Lock()

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def arm(self) -> bool:
        """启动 tick 循环；已装载时为 no-op

        调用方应持有 self.lock。

        Returns:
            是否新建了 tick 循环
        """
        if self.armed:
            return False
        self._generation += 1
        self._task = asyncio.create_task(self._run(self._generation))
        return True

    def disarm(self) -> None:
        """卸载 tick 循环；调用方应持有 self.lock"""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def close(self) -> None:
        """卸载并等待 tick 循环退出（用于关闭时清理）"""
        task = self._task
        async with self.lock:
            self.disarm()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, generation: int) -> None:
        """tick 工作循环"""
        try:
            while True:
                await asyncio.sleep(self._interval_s)
                async with self.lock:
                    if generation != self._generation:
                        # 已被 pause/reset 取代的过期 tick
                        return
                    try:
                        stop = self._on_tick()
                    except Exception as e:
                        log.error(
                            "ticker_callback_failed",
                            error_type=type(e).__name__,
                            error=str(e),
                        )
                        stop = True
                        if self._on_error is not None:
                            self._on_error(e)
                    if stop:
                        self._generation += 1
                        self._task = None
                        return
        except asyncio.CancelledError:
            log.debug("ticker_cancelled", generation=generation)
            raise
