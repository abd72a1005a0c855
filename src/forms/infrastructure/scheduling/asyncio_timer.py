"""
基于 asyncio 事件循环的周期定时器

每个定时器是事件循环中的一个后台任务: sleep(interval) 后调用回调，循环往复。
cancel() 取消该任务，之后回调不会再被调用；回调中创建的其他任务不受影响。
"""
import asyncio
from logging import Logger, getLogger
from typing import Callable, Optional

from src.forms.domain.interface.timer import ITimerFactory, ITimerHandle


class AsyncioIntervalTimer(ITimerHandle):
    """asyncio 周期定时器句柄"""

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        loop: Optional[asyncio.AbstractEventLoop] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds 必须为正数，当前 {interval_seconds}")
        self._interval_seconds = interval_seconds
        self._callback = callback
        self._logger = logger or getLogger(__name__)
        self._cancelled = False
        loop = loop or asyncio.get_running_loop()
        self._task: asyncio.Task = loop.create_task(self._run())

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self._interval_seconds)
            if self._cancelled:
                return
            try:
                self._callback()
            except Exception as e:
                # 单次回调异常不终止定时器
                self._logger.error(f"定时器回调异常: {e}", exc_info=True)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()


class AsyncioTimerFactory(ITimerFactory):
    """在指定 (或当前运行中的) 事件循环上创建定时器"""

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._loop = loop
        self._logger = logger

    def call_every(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> AsyncioIntervalTimer:
        return AsyncioIntervalTimer(
            interval_seconds, callback, loop=self._loop, logger=self._logger
        )
