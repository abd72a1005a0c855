"""
forms_config_loader.py - 表单自动保存 TOML 配置加载器

从 config/forms/autosave.toml 加载自动保存与离开拦截配置，并转换为对应的配置值对象。
"""
import tomllib
from pathlib import Path
from typing import Optional

from src.forms.domain.value_object.config.auto_save_config import AutoSaveConfig
from src.forms.domain.value_object.config.navigation_guard_config import (
    NavigationGuardConfig,
)
from src.forms.domain.value_object.form_type import FormType


# 项目根目录 (从 src/main/config/forms_config_loader.py 向上 4 级)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
DEFAULT_FORMS_CONFIG_PATH = _PROJECT_ROOT / "config" / "forms" / "autosave.toml"

_AUTO_SAVE_KEYS = (
    "interval_seconds",
    "enabled",
    "notify_duration_ms",
    "show_first_save_notification",
)


def _load_toml(path: Path) -> dict:
    """加载 TOML 文件，文件不存在时返回空字典"""
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _normalize_interval(section: dict) -> dict:
    """interval_ms 转换为 interval_seconds，两者同时存在时以 interval_seconds 为准"""
    section = dict(section)
    if "interval_ms" in section and "interval_seconds" not in section:
        section["interval_seconds"] = section["interval_ms"] / 1000.0
    section.pop("interval_ms", None)
    return section


def load_auto_save_config(
    overrides: Optional[dict] = None,
    form_type: Optional[FormType | str] = None,
    path: Optional[Path] = None,
) -> AutoSaveConfig:
    """
    加载自动保存配置

    优先级: overrides > [autosave.<form_type>] > [autosave] > dataclass 默认值

    Args:
        overrides: 运行时覆盖值 (如页面传入的 interval / enabled)
        form_type: 表单类型，存在对应小节时覆盖通用配置
        path: 配置文件路径，默认 config/forms/autosave.toml
    """
    data = _load_toml(path or DEFAULT_FORMS_CONFIG_PATH)
    autosave = data.get("autosave", {})

    merged = _normalize_interval({k: v for k, v in autosave.items() if not isinstance(v, dict)})
    if form_type is not None:
        per_form = autosave.get(FormType.parse(form_type).value, {})
        merged.update(_normalize_interval(per_form))
    merged.update(_normalize_interval(overrides or {}))

    kwargs = {k: merged[k] for k in _AUTO_SAVE_KEYS if k in merged}
    if "interval_seconds" in kwargs:
        kwargs["interval_seconds"] = float(kwargs["interval_seconds"])
    return AutoSaveConfig(**kwargs)


def load_navigation_guard_config(
    overrides: Optional[dict] = None,
    path: Optional[Path] = None,
) -> NavigationGuardConfig:
    """
    加载离开拦截配置

    优先级: overrides > TOML 文件 > dataclass 默认值
    """
    data = _load_toml(path or DEFAULT_FORMS_CONFIG_PATH)
    guard = data.get("navigation_guard", {})
    overrides = overrides or {}

    kwargs = {}
    for key in ("enabled", "message"):
        if key in overrides:
            kwargs[key] = overrides[key]
        elif key in guard:
            kwargs[key] = guard[key]

    return NavigationGuardConfig(**kwargs)


def draft_keep_days_from(config: dict, default: int = 30) -> int:
    """从已加载的配置字典 (TOML 或 YAML) 读取草稿保留天数"""
    return int((config.get("drafts") or {}).get("keep_days", default))
