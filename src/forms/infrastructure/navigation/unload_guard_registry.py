"""
UnloadGuardRegistry - 非浏览器宿主的卸载拦截实现

浏览器中由 beforeunload 事件完成拦截；在服务端渲染、桌面或命令行宿主中，
由宿主在退出前调用 dispatch_before_unload()，根据返回事件决定是否继续退出。

事件语义与 beforeunload 一致: 任一拦截条件成立时 default_prevented=True，
return_value 为确认提示文案。
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from src.forms.domain.interface.navigation import IUnloadGuardHandle, IUnloadGuardHost


@dataclass
class BeforeUnloadEvent:
    """卸载事件"""

    default_prevented: bool = False
    return_value: Optional[str] = None

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(eq=False)
class _Registration:
    predicate: Callable[[], bool]
    message: str


class _RegistryHandle(IUnloadGuardHandle):
    def __init__(self, registry: "UnloadGuardRegistry", registration: _Registration) -> None:
        self._registry = registry
        self._registration = registration

    def remove(self) -> None:
        self._registry._unregister(self._registration)


class UnloadGuardRegistry(IUnloadGuardHost):
    """卸载拦截注册表"""

    def __init__(self) -> None:
        self._registrations: List[_Registration] = []

    def register_unload_guard(
        self, predicate: Callable[[], bool], message: str
    ) -> IUnloadGuardHandle:
        registration = _Registration(predicate=predicate, message=message)
        self._registrations.append(registration)
        return _RegistryHandle(self, registration)

    def _unregister(self, registration: _Registration) -> None:
        if registration in self._registrations:
            self._registrations.remove(registration)

    @property
    def guard_count(self) -> int:
        return len(self._registrations)

    def dispatch_before_unload(self) -> BeforeUnloadEvent:
        """按注册顺序检查，第一个成立的拦截条件决定提示文案"""
        event = BeforeUnloadEvent()
        for registration in list(self._registrations):
            if registration.predicate():
                event.prevent_default()
                event.return_value = registration.message
                break
        return event
