"""
IDraftStore 接口 - 表单草稿存储

自动保存调度器只依赖本接口，具体实现 (数据库、远端服务、内存) 由基础设施层提供。
所有方法都是协程，调用方在事件循环中 await。
"""
from abc import ABC, abstractmethod
from typing import Optional

from src.forms.domain.value_object.form_snapshot import FormSnapshot
from src.forms.domain.value_object.form_type import FormType


class IDraftStore(ABC):
    """草稿存储接口"""

    @abstractmethod
    async def save_draft(self, form_type: FormType, data: FormSnapshot) -> Optional[bool]:
        """
        保存草稿 (同一用户同一表单类型仅保留一份)

        相同快照重复保存是安全的。失败时抛出异常。

        Returns:
            False 表示草稿没有写入 (如内容为空)，调用方不应将其计为一次保存；
            True 或 None 表示已写入
        """

    @abstractmethod
    async def load_draft(self, form_type: FormType) -> Optional[FormSnapshot]:
        """加载草稿，不存在时返回 None"""

    @abstractmethod
    async def delete_draft(self, form_type: FormType) -> None:
        """删除草稿"""

    @abstractmethod
    async def has_draft(self, form_type: FormType) -> bool:
        """是否存在草稿"""
