"""
FormSnapshot 值对象 - 表单内容快照

FormSnapshot 是字段名到字段值的可序列化映射，代表某一时刻表单的完整内容。

设计决策:
- 快照相等性为结构相等，通过稳定序列化 (sort_keys=True) 比较，
  与字段插入顺序无关
- 使用 SHA-256 摘要 (fingerprint) 作为比较键，避免保存整份 JSON 文本
- 观察快照时深拷贝，调用方后续修改原字典不会影响会话内状态
"""
import copy
import dataclasses
import hashlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

FormSnapshot = Dict[str, Any]


def _canonical_default(o: Any) -> Any:
    """json.dumps 的 default 钩子，将特殊类型转换为确定性的 JSON 表示。"""
    if isinstance(o, datetime):
        return {"__datetime__": o.isoformat()}
    if isinstance(o, date):
        return {"__date__": o.isoformat()}
    if isinstance(o, Decimal):
        return {"__decimal__": str(o)}
    if isinstance(o, Enum):
        return {"__enum__": f"{type(o).__name__}.{o.name}"}
    if isinstance(o, (set, frozenset)):
        return {"__set__": sorted(o, key=repr)}
    if dataclasses.is_dataclass(o) and not isinstance(o, type):
        return {"__dataclass__": type(o).__qualname__, **dataclasses.asdict(o)}
    # pandas.DataFrame 等表格对象
    to_dict = getattr(o, "to_dict", None)
    if callable(to_dict):
        return {"__table__": to_dict(orient="records")}
    return repr(o)


def canonical_json(snapshot: FormSnapshot) -> str:
    """将快照序列化为键有序的 JSON 字符串，结构相等的快照得到相同结果。"""
    return json.dumps(
        snapshot,
        sort_keys=True,
        default=_canonical_default,
        ensure_ascii=False,
        separators=(",", ":"),
    )


def snapshot_fingerprint(snapshot: FormSnapshot) -> str:
    """计算快照的 SHA-256 摘要。"""
    return hashlib.sha256(canonical_json(snapshot).encode("utf-8")).hexdigest()


def snapshots_equal(left: FormSnapshot, right: FormSnapshot) -> bool:
    """结构相等比较"""
    return canonical_json(left) == canonical_json(right)


def copy_snapshot(snapshot: FormSnapshot) -> FormSnapshot:
    """深拷贝快照"""
    return copy.deepcopy(dict(snapshot))


def _is_blank(value: Any) -> bool:
    return value == "" or value is None


def _is_meaningful(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    if isinstance(value, (list, tuple)):
        return any(
            any(not _is_blank(v) for v in item.values())
            if isinstance(item, dict)
            else item != ""
            for item in value
        )
    if isinstance(value, dict):
        return any(not _is_blank(v) for v in value.values())
    return value is not None


def has_meaningful_data(snapshot: FormSnapshot) -> bool:
    """
    判断快照是否包含有意义的内容

    规则:
    - 字符串: 去除首尾空白后非空
    - 数字: 非 0 (布尔值始终视为有内容)
    - 列表: 至少有一个元素非空；字典元素需至少有一个非空字段
    - 字典: 至少有一个值非空字符串且非 None
    - 其他: 非 None

    仅包含默认值的表单不写入草稿表。
    """
    return any(_is_meaningful(value) for value in snapshot.values())
