"""Notification 值对象 - 面向用户的提示消息"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_TOAST_DURATION_MS = 5000


class NotificationKind(Enum):
    """提示级别"""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """一条提示消息，duration_ms 为空时使用提示中心的默认时长。"""

    kind: NotificationKind
    title: str
    message: str = ""
    duration_ms: Optional[int] = None


# 自动保存成功提示（低优先级）
DRAFT_SAVED_TITLE = "Draft saved"
DRAFT_SAVED_MESSAGE = "Your progress has been automatically saved"

# 自动保存失败提示
AUTO_SAVE_FAILED_TITLE = "Auto-save failed"
AUTO_SAVE_FAILED_MESSAGE = "Failed to save form draft"
