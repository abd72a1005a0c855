"""
Value Object Module

领域层值对象定义。

子模块分类:
- form_type: 表单类型枚举
- form_snapshot: 表单快照、结构比较与有效内容判断
- notification: 用户提示消息
- user: 当前用户身份
- config/: 配置相关 (自动保存配置、离开拦截配置)
"""

from .form_type import FormType
from .form_snapshot import (
    FormSnapshot,
    canonical_json,
    copy_snapshot,
    has_meaningful_data,
    snapshot_fingerprint,
    snapshots_equal,
)
from .notification import Notification, NotificationKind
from .user import User
from .config import AutoSaveConfig, NavigationGuardConfig

__all__ = [
    # 表单
    "FormType",
    "FormSnapshot",
    "canonical_json",
    "copy_snapshot",
    "has_meaningful_data",
    "snapshot_fingerprint",
    "snapshots_equal",
    # 提示
    "Notification",
    "NotificationKind",
    # 用户
    "User",
    # 配置
    "AutoSaveConfig",
    "NavigationGuardConfig",
]
