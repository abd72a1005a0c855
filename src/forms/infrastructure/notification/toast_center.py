"""
ToastCenter - 进程内提示中心

保存当前可见的提示 (toast)，供页面渲染:
- 每条提示分配一个短随机 id
- 未指定时长时默认 5 秒后过期
- 可按 id 手动关闭
- 所有提示同时写入日志，error 级别使用 ERROR 日志
"""
import secrets
import time
from dataclasses import dataclass
from logging import Logger, getLogger
from typing import Callable, List, Optional

from src.forms.domain.interface.notifier import INotifier
from src.forms.domain.value_object.notification import (
    DEFAULT_TOAST_DURATION_MS,
    Notification,
    NotificationKind,
)


@dataclass(frozen=True)
class Toast:
    toast_id: str
    notification: Notification
    expires_at: float


class ToastCenter(INotifier):
    """提示中心"""

    def __init__(
        self,
        default_duration_ms: int = DEFAULT_TOAST_DURATION_MS,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[Logger] = None,
    ) -> None:
        self._default_duration_ms = default_duration_ms
        self._clock = clock
        self._logger = logger or getLogger(__name__)
        self._toasts: List[Toast] = []

    def notify(self, notification: Notification) -> None:
        self.add(notification)

    def add(self, notification: Notification) -> str:
        """添加提示，返回 id"""
        duration_ms = notification.duration_ms or self._default_duration_ms
        toast = Toast(
            toast_id=secrets.token_hex(5),
            notification=notification,
            expires_at=self._clock() + duration_ms / 1000.0,
        )
        self._toasts.append(toast)

        text = f"[{notification.kind.value}] {notification.title}"
        if notification.message:
            text = f"{text}: {notification.message}"
        if notification.kind is NotificationKind.ERROR:
            self._logger.error(text)
        else:
            self._logger.info(text)
        return toast.toast_id

    def remove(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.toast_id != toast_id]
        return len(self._toasts) < before

    def active(self) -> List[Toast]:
        """当前未过期的提示，过期提示同时被移除"""
        now = self._clock()
        self._toasts = [t for t in self._toasts if t.expires_at > now]
        return list(self._toasts)

    def clear(self) -> None:
        self._toasts.clear()
