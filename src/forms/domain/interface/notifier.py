"""INotifier 接口 - 用户提示 (toast) 输出"""
from abc import ABC, abstractmethod

from src.forms.domain.value_object.notification import Notification


class INotifier(ABC):
    """提示输出接口，调用方不关心返回值"""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        ...
