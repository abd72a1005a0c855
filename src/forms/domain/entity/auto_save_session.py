"""
AutoSaveSession 实体

单个表单编辑视图的自动保存会话状态，取代全局共享的表单上下文:
由编辑视图创建，以引用方式传入 DirtyTracker、AutoSaveScheduler 和 NavigationGuard，
视图卸载时 close() 释放。

状态机:
    Clean --(编辑)--> Dirty --(保存成功)--> Clean
    Dirty --(导航确认)--> Clean 并离开 / 取消则保持 Dirty

不变量:
- is_saving 为 True 时不允许开始新的保存 (单会话至多一个进行中的保存)
- 会话关闭后所有状态变更被忽略，迟到的保存结果直接丢弃
"""
from datetime import datetime
from typing import Callable, List, Optional

from src.forms.domain.value_object.form_snapshot import FormSnapshot
from src.forms.domain.value_object.form_type import FormType

# 监听器签名: listener(session, field_name)
SessionListener = Callable[["AutoSaveSession", str], None]


class AutoSaveSession:
    """表单编辑会话"""

    def __init__(self, form_type: FormType | str, auto_save_enabled: bool = True) -> None:
        self.form_type: FormType = FormType.parse(form_type)
        self.last_saved_snapshot: Optional[FormSnapshot] = None
        self.last_saved_fingerprint: Optional[str] = None
        self.is_saving: bool = False
        self.last_saved_at: Optional[datetime] = None
        self.has_unsaved_changes: bool = False
        self.auto_save_enabled: bool = auto_save_enabled
        self.successful_saves: int = 0
        self._closed: bool = False
        self._listeners: List[SessionListener] = []

    # ========== 监听 ==========

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, field_name: str) -> None:
        for listener in list(self._listeners):
            listener(self, field_name)

    # ========== 生命周期 ==========

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """释放会话。幂等，监听器在清空前收到 "closed" 通知。"""
        if self._closed:
            return
        self._closed = True
        self._emit("closed")
        self._listeners.clear()

    # ========== 自动保存开关 ==========

    def enable_auto_save(self) -> None:
        self._set_auto_save_enabled(True)

    def disable_auto_save(self) -> None:
        self._set_auto_save_enabled(False)

    def _set_auto_save_enabled(self, enabled: bool) -> None:
        if self._closed or self.auto_save_enabled == enabled:
            return
        self.auto_save_enabled = enabled
        self._emit("auto_save_enabled")

    # ========== 脏状态 ==========

    def set_has_unsaved_changes(self, value: bool) -> None:
        if self._closed or self.has_unsaved_changes == value:
            return
        self.has_unsaved_changes = value
        self._emit("has_unsaved_changes")

    def set_baseline(self, snapshot: FormSnapshot, fingerprint: str) -> None:
        """记录基线快照，不计为一次保存"""
        if self._closed:
            return
        self.last_saved_snapshot = snapshot
        self.last_saved_fingerprint = fingerprint

    # ========== 保存 ==========

    def begin_save(self) -> bool:
        """
        标记保存开始

        Returns:
            False 表示已有保存进行中或会话已关闭，本次不应执行
        """
        if self._closed or self.is_saving:
            return False
        self.is_saving = True
        self._emit("is_saving")
        return True

    def complete_save(
        self, snapshot: FormSnapshot, fingerprint: str, saved_at: datetime
    ) -> None:
        """保存成功: 更新最近保存的快照与时间"""
        if self._closed:
            return
        self.last_saved_snapshot = snapshot
        self.last_saved_fingerprint = fingerprint
        self.last_saved_at = saved_at
        self.successful_saves += 1
        self._emit("last_saved_at")

    def end_save(self) -> None:
        """无论成功失败都需调用，清除进行中标记"""
        if self._closed:
            self.is_saving = False
            return
        self.is_saving = False
        self._emit("is_saving")

    def reset_save_state(self) -> None:
        """草稿被删除后重置保存记录"""
        if self._closed:
            return
        self.last_saved_at = None
        self.set_has_unsaved_changes(False)
        self._emit("last_saved_at")
