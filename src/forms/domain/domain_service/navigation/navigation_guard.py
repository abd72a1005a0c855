"""
NavigationGuard - 未保存修改的离开拦截

防止用户在有未保存修改时静默离开编辑页面:
- 页面卸载 (刷新、关闭标签页): 通过 IUnloadGuardHost 注册拦截，宿主阻止默认行为并展示确认提示
- 程序化跳转: check_unsaved_changes() 弹出确认框，用户确认后才允许离开
- navigate_with_check(): 先检查，检查通过才调用路由跳转

未登录或拦截被禁用时，所有检查直接放行，不弹出任何提示。
"""
from logging import Logger, getLogger
from typing import Optional

from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.interface.auth_provider import IAuthProvider
from src.forms.domain.interface.navigation import (
    IConfirmPrompt,
    IRouter,
    IUnloadGuardHandle,
    IUnloadGuardHost,
)
from src.forms.domain.value_object.config.navigation_guard_config import (
    NavigationGuardConfig,
)


class NavigationGuard:
    """离开页面拦截器"""

    def __init__(
        self,
        session: AutoSaveSession,
        confirm_prompt: IConfirmPrompt,
        router: Optional[IRouter] = None,
        unload_host: Optional[IUnloadGuardHost] = None,
        config: Optional[NavigationGuardConfig] = None,
        auth_provider: Optional[IAuthProvider] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._session = session
        self._confirm_prompt = confirm_prompt
        self._router = router
        self._unload_host = unload_host
        self._config = config or NavigationGuardConfig()
        self._auth_provider = auth_provider
        self._logger = logger or getLogger(__name__)
        self._unload_handle: Optional[IUnloadGuardHandle] = None

        self._session.add_listener(self._on_session_changed)

    @property
    def has_unsaved_changes(self) -> bool:
        return self._session.has_unsaved_changes

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def message(self) -> str:
        return self._config.message

    @property
    def attached(self) -> bool:
        return self._unload_handle is not None

    # ========== 卸载拦截 ==========

    def attach(self) -> None:
        """向宿主注册卸载拦截。重复调用不会重复注册。"""
        if not self._config.enabled or self._unload_host is None:
            return
        if self._unload_handle is not None or self._session.closed:
            return
        self._unload_handle = self._unload_host.register_unload_guard(
            self.should_block_unload, self._config.message
        )

    def detach(self) -> None:
        """移除卸载拦截"""
        if self._unload_handle is not None:
            self._unload_handle.remove()
            self._unload_handle = None

    def should_block_unload(self) -> bool:
        """卸载时是否需要拦截"""
        if not self._config.enabled or self._session.closed:
            return False
        return self._session.has_unsaved_changes and self._has_user()

    def _has_user(self) -> bool:
        if self._auth_provider is None:
            return True
        return self._auth_provider.current_user() is not None

    def _on_session_changed(self, session: AutoSaveSession, field_name: str) -> None:
        if field_name == "closed":
            self.detach()
            session.remove_listener(self._on_session_changed)

    # ========== 程序化导航 ==========

    def check_unsaved_changes(self) -> bool:
        """
        离开前检查

        Returns:
            无未保存修改时立即返回 True；否则返回用户在确认框中的选择
        """
        if not self._config.enabled or not self._session.has_unsaved_changes:
            return True
        if not self._has_user():
            return True
        return bool(self._confirm_prompt.confirm(self._config.message))

    def navigate_with_check(self, path: str) -> bool:
        """
        检查通过后跳转到 path

        用户确认放弃修改时会话转为 Clean，避免随后的卸载拦截再次询问。

        Returns:
            是否发生了跳转
        """
        if self._router is None:
            raise RuntimeError("NavigationGuard 未配置 router，无法跳转")

        was_dirty = self._session.has_unsaved_changes
        if not self.check_unsaved_changes():
            self._logger.info(
                f"用户取消离开，保留未保存修改 [{self._session.form_type.value}]"
            )
            return False

        if was_dirty:
            self._session.set_has_unsaved_changes(False)
        self._router.navigate(path)
        return True
