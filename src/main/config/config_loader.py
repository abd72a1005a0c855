"""
config_loader.py - 配置加载器

支持:
1. TOML 配置文件 (表单自动保存配置)
2. YAML 配置文件 (兼容旧部署)
3. 配置验证
"""
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

from src.forms.domain.value_object.form_type import FormType


# 从 src/main/config/config_loader.py 到项目根目录需要 4 级 parent
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class ConfigLoader:
    """
    配置加载器

    - 表单配置: 从 TOML (或 YAML) 文件加载
    """

    @staticmethod
    def load_toml(path: str) -> Dict[str, Any]:
        """加载 TOML 配置文件"""
        with open(path, "rb") as f:
            return tomllib.load(f)

    @staticmethod
    def load_yaml(path: str) -> Dict[str, Any]:
        """加载 YAML 配置文件"""
        import yaml
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def load_forms_config(path: str) -> Dict[str, Any]:
        """按扩展名加载表单配置文件 (.toml / .yaml / .yml)"""
        if not os.path.isabs(path):
            path = str(_PROJECT_ROOT / path)
        if path.endswith((".yaml", ".yml")):
            return ConfigLoader.load_yaml(path)
        return ConfigLoader.load_toml(path)

    @staticmethod
    def validate_forms_config(config: Dict[str, Any]) -> bool:
        """
        验证表单配置

        Args:
            config: 表单配置字典

        Returns:
            True 如果配置有效
        """
        autosave = config.get("autosave", {})
        valid_form_types = {member.value for member in FormType}

        for key, value in autosave.items():
            if isinstance(value, dict):
                if key not in valid_form_types:
                    raise ValueError(f"未知的表单类型小节: autosave.{key}")
                section = value
            else:
                section = {key: value}

            for interval_key in ("interval_seconds", "interval_ms"):
                if interval_key in section and section[interval_key] <= 0:
                    raise ValueError(f"{interval_key} 必须为正数: {section[interval_key]}")

        guard = config.get("navigation_guard", {})
        if "message" in guard and not str(guard["message"]).strip():
            raise ValueError("navigation_guard.message 不能为空")

        keep_days = config.get("drafts", {}).get("keep_days")
        if keep_days is not None and keep_days < 1:
            raise ValueError(f"drafts.keep_days 至少为 1 天: {keep_days}")
        return True
