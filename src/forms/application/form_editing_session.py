"""
FormEditingSession - 单个表单编辑视图的自动保存装配

编辑视图挂载时创建，卸载时关闭。负责把会话、脏状态跟踪、自动保存调度、离开拦截和草稿恢复
装配到一起，对页面只暴露少量操作:

    async with FormEditingSession(FormType.GAS_SAFETY, initial_data, ...) as editing:
        editing.update(form_data)           # 每次编辑后调用
        await editing.save_now()            # 手动保存
        editing.navigate_with_check("/gas-safety")

关闭时保证释放定时器和卸载拦截，进行中的保存不取消。
"""
from datetime import datetime
from logging import Logger, getLogger
from typing import Callable, Optional

from src.forms.domain.domain_service.autosave.auto_save_scheduler import AutoSaveScheduler
from src.forms.domain.domain_service.autosave.dirty_tracker import DirtyTracker
from src.forms.domain.domain_service.autosave.save_status import (
    SaveStatusView,
    describe_save_status,
)
from src.forms.domain.domain_service.navigation.navigation_guard import NavigationGuard
from src.forms.domain.domain_service.restoration.draft_restoration import DraftRestoration
from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.interface.auth_provider import IAuthProvider
from src.forms.domain.interface.draft_store import IDraftStore
from src.forms.domain.interface.navigation import IConfirmPrompt, IRouter, IUnloadGuardHost
from src.forms.domain.interface.notifier import INotifier
from src.forms.domain.interface.timer import ITimerFactory
from src.forms.domain.value_object.config.auto_save_config import AutoSaveConfig
from src.forms.domain.value_object.config.navigation_guard_config import (
    NavigationGuardConfig,
)
from src.forms.domain.value_object.form_snapshot import FormSnapshot
from src.forms.domain.value_object.form_type import FormType


class FormEditingSession:
    """表单编辑会话装配"""

    def __init__(
        self,
        form_type: FormType | str,
        initial_data: FormSnapshot,
        draft_store: IDraftStore,
        timer_factory: ITimerFactory,
        confirm_prompt: IConfirmPrompt,
        router: Optional[IRouter] = None,
        unload_host: Optional[IUnloadGuardHost] = None,
        notifier: Optional[INotifier] = None,
        auth_provider: Optional[IAuthProvider] = None,
        auto_save_config: Optional[AutoSaveConfig] = None,
        guard_config: Optional[NavigationGuardConfig] = None,
        on_save: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
        logger: Optional[Logger] = None,
    ) -> None:
        self._logger = logger or getLogger(__name__)
        self._clock = clock

        self.session = AutoSaveSession(form_type)
        self.tracker = DirtyTracker(self.session)
        self.scheduler = AutoSaveScheduler(
            session=self.session,
            tracker=self.tracker,
            draft_store=draft_store,
            timer_factory=timer_factory,
            config=auto_save_config,
            auth_provider=auth_provider,
            notifier=notifier,
            on_save=on_save,
            on_error=on_error,
            clock=clock,
            logger=self._logger,
        )
        self.guard = NavigationGuard(
            session=self.session,
            confirm_prompt=confirm_prompt,
            router=router,
            unload_host=unload_host,
            config=guard_config,
            auth_provider=auth_provider,
            logger=self._logger,
        )
        self.restoration = DraftRestoration(
            self.session.form_type, draft_store, session=self.session, logger=self._logger
        )

        # 初始内容作为基线
        self.tracker.observe(initial_data)

    # ========== 生命周期 ==========

    def open(self) -> "FormEditingSession":
        """视图挂载: 启动自动保存定时器并注册卸载拦截"""
        self.scheduler.start()
        self.guard.attach()
        self._logger.debug(f"编辑会话已打开 [{self.session.form_type.value}]")
        return self

    def close(self) -> None:
        """视图卸载: 释放定时器与卸载拦截。幂等。"""
        if self.session.closed:
            return
        self.session.close()
        self._logger.debug(f"编辑会话已关闭 [{self.session.form_type.value}]")

    def __enter__(self) -> "FormEditingSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "FormEditingSession":
        return self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ========== 页面操作 ==========

    def update(self, data: FormSnapshot) -> bool:
        """表单内容变化，返回 has_unsaved_changes"""
        return self.scheduler.update_form_data(data)

    async def save_now(self) -> bool:
        return await self.scheduler.save_now()

    def check_unsaved_changes(self) -> bool:
        return self.guard.check_unsaved_changes()

    def navigate_with_check(self, path: str) -> bool:
        return self.guard.navigate_with_check(path)

    def enable_auto_save(self) -> None:
        self.session.enable_auto_save()

    def disable_auto_save(self) -> None:
        self.session.disable_auto_save()

    def status(self, now: Optional[datetime] = None) -> SaveStatusView:
        return describe_save_status(self.session, now or self._clock())

    # ========== 状态 ==========

    @property
    def is_saving(self) -> bool:
        return self.scheduler.is_saving

    @property
    def last_saved_at(self) -> Optional[datetime]:
        return self.scheduler.last_saved_at

    @property
    def auto_save_enabled(self) -> bool:
        return self.scheduler.auto_save_enabled

    @property
    def has_unsaved_changes(self) -> bool:
        return self.session.has_unsaved_changes
