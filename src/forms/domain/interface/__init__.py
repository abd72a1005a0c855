"""
Domain Interface Module

领域层依赖的外部协作方接口，由基础设施层或调用方 (页面视图) 实现。
"""

from .auth_provider import IAuthProvider
from .draft_store import IDraftStore
from .navigation import IConfirmPrompt, IRouter, IUnloadGuardHandle, IUnloadGuardHost
from .notifier import INotifier
from .timer import ITimerFactory, ITimerHandle

__all__ = [
    "IAuthProvider",
    "IDraftStore",
    "IConfirmPrompt",
    "IRouter",
    "IUnloadGuardHandle",
    "IUnloadGuardHost",
    "INotifier",
    "ITimerFactory",
    "ITimerHandle",
]
