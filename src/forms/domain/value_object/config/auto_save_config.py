"""
AutoSaveConfig - 自动保存配置值对象

将自动保存调度中的间隔、开关、提示时长等参数收拢为不可变配置对象，
既可由页面按需构造，也可从 config/forms/autosave.toml 加载。
"""
from dataclasses import dataclass

DEFAULT_AUTO_SAVE_INTERVAL_SECONDS = 30.0


@dataclass(frozen=True)
class AutoSaveConfig:
    """
    自动保存配置

    所有字段均有合理默认值，可按需覆盖。
    """

    # ── 调度参数 ──
    interval_seconds: float = DEFAULT_AUTO_SAVE_INTERVAL_SECONDS  # 自动保存间隔 (30 秒)
    enabled: bool = True                                          # 是否启用自动保存

    # ── 提示参数 ──
    notify_duration_ms: int = 2000                # "Draft saved" 提示展示时长
    show_first_save_notification: bool = False    # 会话首次保存是否提示

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds 必须为正数，当前 {self.interval_seconds}"
            )
        if self.notify_duration_ms < 0:
            raise ValueError(
                f"notify_duration_ms 不能为负数，当前 {self.notify_duration_ms}"
            )

    @classmethod
    def from_milliseconds(cls, interval_ms: int, enabled: bool = True) -> "AutoSaveConfig":
        """按毫秒间隔构造配置"""
        return cls(interval_seconds=interval_ms / 1000.0, enabled=enabled)
