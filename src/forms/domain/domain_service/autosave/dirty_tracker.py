"""
DirtyTracker - 表单脏状态跟踪

每次表单编辑后调用 observe()，同步更新会话的 has_unsaved_changes。

设计决策:
- 会话创建后的第一次观察作为基线，不视为修改，也不触发保存
- 之后每次观察都与最近保存的快照 (或基线) 做结构比较
- 本层不做防抖，防抖由 AutoSaveScheduler 的定时器承担
"""
from typing import Optional

from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.value_object.form_snapshot import (
    FormSnapshot,
    copy_snapshot,
    snapshot_fingerprint,
)


class DirtyTracker:
    """表单脏状态跟踪器"""

    def __init__(self, session: AutoSaveSession) -> None:
        self._session = session
        self._current_snapshot: Optional[FormSnapshot] = None
        self._current_fingerprint: Optional[str] = None

    @property
    def session(self) -> AutoSaveSession:
        return self._session

    @property
    def has_baseline(self) -> bool:
        return self._current_snapshot is not None

    @property
    def current_snapshot(self) -> Optional[FormSnapshot]:
        return self._current_snapshot

    @property
    def current_fingerprint(self) -> Optional[str]:
        return self._current_fingerprint

    def observe(self, snapshot: FormSnapshot) -> bool:
        """
        观察当前表单内容

        Returns:
            观察后的 has_unsaved_changes
        """
        captured = copy_snapshot(snapshot)
        fingerprint = snapshot_fingerprint(captured)
        self._current_snapshot = captured
        self._current_fingerprint = fingerprint

        if self._session.last_saved_fingerprint is None:
            self._session.set_baseline(copy_snapshot(captured), fingerprint)
            return self._session.has_unsaved_changes

        self._session.set_has_unsaved_changes(self.differs_from_saved())
        return self._session.has_unsaved_changes

    def differs_from_saved(self) -> bool:
        """当前快照是否与最近保存的快照不同"""
        if self._current_fingerprint is None:
            return False
        return self._current_fingerprint != self._session.last_saved_fingerprint

    def refresh(self) -> bool:
        """保存完成后重新计算脏状态 (保存期间可能有新的编辑)"""
        self._session.set_has_unsaved_changes(self.differs_from_saved())
        return self._session.has_unsaved_changes
