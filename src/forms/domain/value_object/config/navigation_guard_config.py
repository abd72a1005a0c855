"""NavigationGuardConfig 配置值对象"""
from dataclasses import dataclass

DEFAULT_UNSAVED_CHANGES_MESSAGE = (
    "You have unsaved changes. Are you sure you want to leave?"
)


@dataclass(frozen=True)
class NavigationGuardConfig:
    """离开页面拦截配置"""

    enabled: bool = True                                # 是否启用拦截
    message: str = DEFAULT_UNSAVED_CHANGES_MESSAGE      # 确认提示文案
