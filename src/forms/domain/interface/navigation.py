"""
导航相关接口

- IRouter: 程序化页面跳转
- IConfirmPrompt: 模态确认框
- IUnloadGuardHost: 宿主环境的页面卸载拦截 (浏览器 beforeunload 或等价的生命周期钩子)
"""
from abc import ABC, abstractmethod
from typing import Callable


class IRouter(ABC):
    """路由接口"""

    @abstractmethod
    def navigate(self, path: str) -> None:
        ...


class IConfirmPrompt(ABC):
    """确认框接口，阻塞直到用户确认 (True) 或取消 (False)"""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        ...


class IUnloadGuardHandle(ABC):
    """已注册的卸载拦截句柄"""

    @abstractmethod
    def remove(self) -> None:
        ...


class IUnloadGuardHost(ABC):
    """
    卸载拦截宿主

    predicate 返回 True 时宿主应阻止默认卸载行为，并以 message 作为确认提示。
    不支持卸载拦截的宿主可以返回一个空操作句柄。
    """

    @abstractmethod
    def register_unload_guard(
        self, predicate: Callable[[], bool], message: str
    ) -> IUnloadGuardHandle:
        ...
