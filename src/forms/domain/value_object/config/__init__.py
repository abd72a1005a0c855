from .auto_save_config import AutoSaveConfig
from .navigation_guard_config import NavigationGuardConfig

__all__ = [
    "AutoSaveConfig",
    "NavigationGuardConfig",
]
