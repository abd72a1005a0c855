"""ITimerFactory 接口 - 周期定时器"""
from abc import ABC, abstractmethod
from typing import Callable


class ITimerHandle(ABC):
    """定时器句柄"""

    @abstractmethod
    def cancel(self) -> None:
        """取消定时器。幂等，取消后回调不再触发。"""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class ITimerFactory(ABC):
    """周期定时器工厂"""

    @abstractmethod
    def call_every(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ITimerHandle:
        """每隔 interval_seconds 调用一次 callback (首次在一个间隔之后)"""
