"""
AutoSaveScheduler - 周期性表单草稿自动保存

按配置间隔 (默认 30 秒) 把表单当前快照写入草稿存储，避免浏览器崩溃或误关页面导致录入内容丢失。

设计决策:
- 定时器由 ITimerFactory 提供，每次替换定时器前先取消旧定时器；
  回调携带代次 (generation)，旧定时器即使迟到触发也会被忽略
- 每次 tick 在事件循环中创建一个保存任务，任务完成前由 _save_tasks 持有强引用，
  最近一次任务记录在 _pending_task
- 使用快照 digest 检测变化，与最近保存的快照相同则跳过，避免无效写入
- 会话 is_saving 为 True 时跳过本次请求 (单会话单保存)
- 保存失败时记录日志并回调 on_error，不更新最近保存的快照，下次 tick 重试同一份数据
- 会话首次成功保存不弹提示，之后每次成功保存弹出低优先级 "Draft saved" 提示
- 定时器不依赖登录状态: 未登录时 tick 与保存都是空操作，用户稍后登录即恢复自动保存
- 草稿存储返回 False (内容为空未写入) 时不计为一次保存: 不更新保存时间、不弹提示，
  只记录该快照避免重复提交
- 会话关闭后不取消已发出的保存，其结果直接丢弃
"""
import asyncio
from datetime import datetime
from logging import Logger, getLogger
from typing import Callable, Optional, Set

from src.forms.domain.domain_service.autosave.dirty_tracker import DirtyTracker
from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.interface.auth_provider import IAuthProvider
from src.forms.domain.interface.draft_store import IDraftStore
from src.forms.domain.interface.notifier import INotifier
from src.forms.domain.interface.timer import ITimerFactory, ITimerHandle
from src.forms.domain.value_object.config.auto_save_config import AutoSaveConfig
from src.forms.domain.value_object.form_snapshot import FormSnapshot, copy_snapshot
from src.forms.domain.value_object.notification import (
    AUTO_SAVE_FAILED_MESSAGE,
    AUTO_SAVE_FAILED_TITLE,
    DRAFT_SAVED_MESSAGE,
    DRAFT_SAVED_TITLE,
    Notification,
    NotificationKind,
)


class AutoSaveScheduler:
    """周期性自动保存调度器"""

    def __init__(
        self,
        session: AutoSaveSession,
        tracker: DirtyTracker,
        draft_store: IDraftStore,
        timer_factory: ITimerFactory,
        config: Optional[AutoSaveConfig] = None,
        auth_provider: Optional[IAuthProvider] = None,
        notifier: Optional[INotifier] = None,
        on_save: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
        logger: Optional[Logger] = None,
    ) -> None:
        if tracker.session is not session:
            raise ValueError("DirtyTracker 必须跟踪同一个 AutoSaveSession")
        self._session = session
        self._tracker = tracker
        self._draft_store = draft_store
        self._timer_factory = timer_factory
        self._config = config or AutoSaveConfig()
        self._auth_provider = auth_provider
        self._notifier = notifier
        self._on_save = on_save
        self._on_error = on_error
        self._clock = clock
        self._logger = logger or getLogger(__name__)

        self._interval_seconds: float = self._config.interval_seconds
        self._enabled: bool = self._config.enabled
        self._timer: Optional[ITimerHandle] = None
        self._generation: int = 0
        self._pending_task: Optional[asyncio.Task] = None
        self._save_tasks: Set[asyncio.Task] = set()
        self._shut_down: bool = False

        self._session.add_listener(self._on_session_changed)

    # ========== 状态 ==========

    @property
    def is_saving(self) -> bool:
        return self._session.is_saving

    @property
    def last_saved_at(self) -> Optional[datetime]:
        return self._session.last_saved_at

    @property
    def auto_save_enabled(self) -> bool:
        return self._enabled and self._session.auto_save_enabled

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    @property
    def _tag(self) -> str:
        return self._session.form_type.value

    # ========== 表单数据 ==========

    def update_form_data(self, snapshot: FormSnapshot) -> bool:
        """表单内容变化时调用，返回 has_unsaved_changes"""
        return self._tracker.observe(snapshot)

    # ========== 定时器控制 ==========

    def start(self) -> None:
        """按当前配置启动定时器 (已启动时替换)"""
        self._reschedule()

    def stop(self) -> None:
        """停止定时器，不影响进行中的保存"""
        self._cancel_timer()

    def enable(self) -> None:
        self._enabled = True
        self._reschedule()

    def disable(self) -> None:
        self._enabled = False
        self._reschedule()

    def set_interval(self, interval_seconds: float) -> None:
        """修改保存间隔。运行中则原子替换定时器，旧间隔的 tick 不再触发。"""
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds 必须为正数，当前 {interval_seconds}")
        self._interval_seconds = interval_seconds
        if self.is_running:
            self._reschedule()

    def shutdown(self) -> None:
        """
        释放调度器 (视图卸载)

        取消定时器并解除会话监听。进行中的保存不取消，完成后结果被丢弃。
        """
        if self._shut_down:
            return
        self._shut_down = True
        self._cancel_timer()
        self._session.remove_listener(self._on_session_changed)
        self._logger.debug(f"AutoSaveScheduler 已关闭 [{self._tag}]")

    def _should_run(self) -> bool:
        if self._shut_down or self._session.closed:
            return False
        return self.auto_save_enabled

    def _has_user(self) -> bool:
        if self._auth_provider is None:
            return True
        return self._auth_provider.current_user() is not None

    def _reschedule(self) -> None:
        self._cancel_timer()
        if not self._should_run():
            return
        self._generation += 1
        generation = self._generation
        self._timer = self._timer_factory.call_every(
            self._interval_seconds, lambda: self._on_tick(generation)
        )
        self._logger.debug(
            f"自动保存定时器已启动 (interval={self._interval_seconds}s) [{self._tag}]"
        )

    def _cancel_timer(self) -> None:
        # 先递增代次，保证旧定时器的回调即使已排队也不会执行保存
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_tick(self, generation: int) -> None:
        if generation != self._generation or not self._should_run():
            return
        if not self._has_user():
            return
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.perform_auto_save())
        self._save_tasks.add(task)
        task.add_done_callback(self._save_tasks.discard)
        self._pending_task = task

    def _on_session_changed(self, session: AutoSaveSession, field_name: str) -> None:
        if field_name == "auto_save_enabled":
            self._reschedule()
        elif field_name == "closed":
            self.shutdown()

    # ========== 保存 ==========

    async def save_now(self) -> bool:
        """
        立即保存 (不等待下一次 tick)

        与定时保存使用同一套判断逻辑，保存完成 (成功或失败) 后才返回。

        Returns:
            True 表示本次确实写入了草稿存储
        """
        return await self.perform_auto_save()

    async def perform_auto_save(self) -> bool:
        """
        执行一次自动保存尝试

        跳过条件: 调度器已关闭、自动保存已禁用、未登录、已有保存进行中、快照未变化。
        """
        session = self._session
        if self._shut_down or session.closed:
            return False
        if not self.auto_save_enabled or not self._has_user():
            return False
        if session.is_saving:
            self._logger.debug(f"上一次保存尚未完成，跳过本次 [{self._tag}]")
            return False

        snapshot = self._tracker.current_snapshot
        fingerprint = self._tracker.current_fingerprint
        if snapshot is None or fingerprint is None:
            return False
        if fingerprint == session.last_saved_fingerprint:
            self._logger.debug(
                f"表单未变化 (digest={fingerprint[:8]}...)，跳过保存 [{self._tag}]"
            )
            return False

        if not session.begin_save():
            return False
        try:
            written = await self._draft_store.save_draft(session.form_type, copy_snapshot(snapshot))
        except Exception as e:
            self._handle_save_failure(e)
            return False
        else:
            if written is False:
                return self._handle_save_skipped(snapshot, fingerprint)
            return self._handle_save_success(snapshot, fingerprint)
        finally:
            session.end_save()

    def _handle_save_skipped(self, snapshot: FormSnapshot, fingerprint: str) -> bool:
        if self._shut_down or self._session.closed:
            return False
        # 记为基线而非保存: 相同内容不再提交，保存时间与提示保持不变
        self._session.set_baseline(snapshot, fingerprint)
        self._tracker.refresh()
        self._logger.debug(f"草稿无有效内容，存储未写入 [{self._tag}]")
        return False

    def _handle_save_success(self, snapshot: FormSnapshot, fingerprint: str) -> bool:
        session = self._session
        if self._shut_down or session.closed:
            self._logger.debug(f"会话已关闭，丢弃保存结果 [{self._tag}]")
            return False

        session.complete_save(snapshot, fingerprint, self._clock())
        self._tracker.refresh()
        self._logger.debug(
            f"草稿已保存 (digest={fingerprint[:8]}...) [{self._tag}]"
        )
        self._invoke_callback(self._on_save)

        if session.successful_saves > 1 or self._config.show_first_save_notification:
            self._notify(
                Notification(
                    kind=NotificationKind.INFO,
                    title=DRAFT_SAVED_TITLE,
                    message=DRAFT_SAVED_MESSAGE,
                    duration_ms=self._config.notify_duration_ms,
                )
            )
        return True

    def _handle_save_failure(self, error: Exception) -> None:
        if self._shut_down or self._session.closed:
            self._logger.warning(f"会话已关闭，忽略保存失败 [{self._tag}]: {error}")
            return

        self._logger.error(f"自动保存失败 [{self._tag}]: {error}", exc_info=True)
        self._invoke_callback(self._on_error, error)
        self._notify(
            Notification(
                kind=NotificationKind.ERROR,
                title=AUTO_SAVE_FAILED_TITLE,
                message=AUTO_SAVE_FAILED_MESSAGE,
            )
        )

    def _invoke_callback(self, callback: Optional[Callable], *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            self._logger.error(f"自动保存回调异常 [{self._tag}]: {e}", exc_info=True)

    def _notify(self, notification: Notification) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(notification)
        except Exception as e:
            self._logger.error(f"提示发送失败 [{self._tag}]: {e}", exc_info=True)
