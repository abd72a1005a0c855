"""草稿 JSON 序列化器，支持 DataFrame、datetime、Decimal、set、Enum、dataclass 等表单字段类型。

存储格式 (form_drafts.form_data):
    {"schema_version": 1, "form_type": "gas_safety", "data": {...表单字段...}}

字段类型转换规则:
| Python 类型    | JSON 表示                                          | 反序列化还原              |
|---------------|---------------------------------------------------|--------------------------|
| pd.DataFrame  | {"__dataframe__": true, "records": [...]}          | pd.DataFrame(records)    |
| datetime      | {"__datetime__": "ISO 8601 字符串"}                 | datetime.fromisoformat   |
| date          | {"__date__": "ISO 8601 日期字符串"}                  | date.fromisoformat       |
| Decimal       | {"__decimal__": "字符串"}                           | Decimal(str)             |
| set           | {"__set__": true, "values": [...]}                 | set(values)              |
| Enum          | {"__enum__": "ClassName.VALUE"}                    | 动态还原                  |
| dataclass     | {"__dataclass__": "module.ClassName", ...fields}   | 动态还原                  |

设备检查表 (appliances)、发票明细 (line_items) 等表格字段可以直接使用 DataFrame。
"""

import dataclasses
import importlib
import json
import sys
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

import pandas as pd

from src.forms.domain.value_object.form_snapshot import FormSnapshot
from src.forms.domain.value_object.form_type import FormType
from src.forms.infrastructure.persistence.migration_chain import DraftMigrationChain

CURRENT_SCHEMA_VERSION = 1


class _DraftEncoder(json.JSONEncoder):
    """草稿 JSON 编码器"""

    def default(self, o: Any) -> Any:
        if isinstance(o, pd.DataFrame):
            return {"__dataframe__": True, "records": o.to_dict(orient="records")}

        if isinstance(o, datetime):
            return {"__datetime__": o.isoformat()}

        if isinstance(o, date):
            return {"__date__": o.isoformat()}

        if isinstance(o, Decimal):
            return {"__decimal__": str(o)}

        if isinstance(o, (set, frozenset)):
            return {"__set__": True, "values": sorted(o, key=repr)}

        if isinstance(o, Enum):
            return {"__enum__": f"{type(o).__name__}.{o.name}"}

        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            module = type(o).__module__
            qualname = type(o).__qualname__
            return {"__dataclass__": f"{module}.{qualname}", **dataclasses.asdict(o)}

        return super().default(o)


def _object_hook(obj: Dict[str, Any]) -> Any:
    """还原特殊类型标记"""

    if obj.get("__dataframe__") is True and "records" in obj:
        records = obj["records"]
        return pd.DataFrame(records) if records else pd.DataFrame()

    if "__datetime__" in obj:
        return datetime.fromisoformat(obj["__datetime__"])

    if "__date__" in obj:
        return date.fromisoformat(obj["__date__"])

    if "__decimal__" in obj:
        return Decimal(obj["__decimal__"])

    if obj.get("__set__") is True and "values" in obj:
        return set(obj["values"])

    if "__enum__" in obj:
        return _resolve_enum(obj["__enum__"])

    if "__dataclass__" in obj:
        return _resolve_dataclass(obj)

    return obj


def _resolve_enum(enum_ref: str) -> Any:
    """
    动态还原 Enum 值，enum_ref 格式 "ClassName.MEMBER_NAME"。
    优先匹配 FormType，其余在已加载模块中查找，找不到时返回原始字符串。
    """
    parts = enum_ref.split(".", 1)
    if len(parts) != 2:
        return enum_ref

    class_name, member_name = parts
    if class_name == FormType.__name__:
        try:
            return FormType[member_name]
        except KeyError:
            return enum_ref

    for module in list(sys.modules.values()):
        if module is None:
            continue
        cls = getattr(module, class_name, None)
        if isinstance(cls, type) and issubclass(cls, Enum):
            try:
                return cls[member_name]
            except KeyError:
                continue
    return enum_ref


def _resolve_dataclass(obj: Dict[str, Any]) -> Any:
    """动态还原 dataclass 实例，无法还原时保留字典"""
    fqn = obj["__dataclass__"]
    parts = fqn.rsplit(".", 1)
    if len(parts) != 2:
        return obj

    module_path, class_name = parts
    try:
        cls = getattr(importlib.import_module(module_path), class_name)
    except (ImportError, AttributeError):
        return obj

    if not dataclasses.is_dataclass(cls):
        return obj

    fields = {k: v for k, v in obj.items() if k != "__dataclass__"}
    try:
        return cls(**fields)
    except TypeError:
        return obj


class DraftSerializer:
    """草稿序列化器"""

    def __init__(
        self,
        migration_chain: Optional[DraftMigrationChain] = None,
        current_version: int = CURRENT_SCHEMA_VERSION,
    ) -> None:
        self._migration_chain = migration_chain or DraftMigrationChain()
        self._current_version = current_version

    @property
    def current_version(self) -> int:
        return self._current_version

    def serialize(self, form_type: FormType, data: FormSnapshot) -> str:
        """序列化为带版本号的 JSON 字符串"""
        payload = {
            "schema_version": self._current_version,
            "form_type": form_type.value,
            "data": data,
        }
        return json.dumps(payload, cls=_DraftEncoder, ensure_ascii=False)

    def deserialize(self, json_str: str) -> FormSnapshot:
        """
        从 JSON 字符串还原表单数据

        旧版本草稿按迁移链升级到当前版本。

        Raises:
            ValueError: JSON 无效或缺少 data 字段
        """
        payload = json.loads(json_str, object_hook=_object_hook)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise ValueError("draft payload missing 'data' object")

        data = payload["data"]
        version = payload.get("schema_version", 1)
        if version < self._current_version:
            form_type = payload.get("form_type")
            data = self._migration_chain.migrate(
                data,
                version,
                self._current_version,
                FormType.parse(form_type) if form_type else None,
            )
        return data
