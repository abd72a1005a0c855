"""
保存状态指示

将会话状态转换为页面上展示的保存状态文案:
    Saving... / Unsaved changes / Saved <相对时间> / Not saved
自动保存被禁用时不展示 (DISABLED)。
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from src.forms.domain.entity.auto_save_session import AutoSaveSession


class SaveStatus(Enum):
    DISABLED = "disabled"
    SAVING = "saving"
    UNSAVED = "unsaved"
    SAVED = "saved"
    NOT_SAVED = "not_saved"


@dataclass(frozen=True)
class SaveStatusView:
    status: SaveStatus
    text: str


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_last_saved(saved_at: datetime, now: Optional[datetime] = None) -> str:
    """
    相对时间描述

    < 30 秒: Just now；< 1 分钟: Less than a minute ago；
    < 1 小时: N minute(s) ago；< 1 天: N hour(s) ago；否则显示绝对时间。
    """
    now = now or datetime.now()
    seconds = int((now - saved_at).total_seconds())

    if seconds < 30:
        return "Just now"
    if seconds < 60:
        return "Less than a minute ago"
    if seconds < 3600:
        return _plural(seconds // 60, "minute")
    if seconds < 86400:
        return _plural(seconds // 3600, "hour")
    return f"{saved_at:%b} {saved_at.day}, {saved_at:%H:%M}"


def describe_save_status(
    session: AutoSaveSession,
    now: Optional[datetime] = None,
    show_last_saved: bool = True,
) -> SaveStatusView:
    """根据会话状态生成保存状态文案，优先级: 保存中 > 未保存修改 > 已保存 > 未保存过"""
    if not session.auto_save_enabled:
        return SaveStatusView(SaveStatus.DISABLED, "")
    if session.is_saving:
        return SaveStatusView(SaveStatus.SAVING, "Saving...")
    if session.has_unsaved_changes:
        return SaveStatusView(SaveStatus.UNSAVED, "Unsaved changes")
    if session.last_saved_at is not None:
        if not show_last_saved:
            return SaveStatusView(SaveStatus.SAVED, "Saved")
        return SaveStatusView(
            SaveStatus.SAVED, f"Saved {format_last_saved(session.last_saved_at, now)}"
        )
    return SaveStatusView(SaveStatus.NOT_SAVED, "Not saved")
