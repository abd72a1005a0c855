"""
草稿 Schema 版本迁移链

表单字段会随业务演进增删，已经存入 form_drafts 的旧草稿需要逐级升级后才能恢复到页面。

- 迁移可以针对全部表单类型注册，也可以只针对某一种表单类型注册
- 每个迁移函数只负责 N → N+1，按版本顺序执行
- 同一 (表单类型, 版本) 只能注册一次
"""
from typing import Any, Callable, Dict, Optional, Tuple

from src.forms.domain.value_object.form_type import FormType

DraftMigrationFn = Callable[[Dict[str, Any]], Dict[str, Any]]

_ALL_FORMS = None


class DraftMigrationChain:
    """草稿版本迁移链"""

    def __init__(self) -> None:
        self._migrations: Dict[Tuple[Optional[FormType], int], DraftMigrationFn] = {}

    def register(
        self,
        from_version: int,
        fn: DraftMigrationFn,
        form_type: Optional[FormType] = _ALL_FORMS,
    ) -> None:
        """
        注册从 from_version 到 from_version+1 的迁移函数

        Args:
            from_version: 源版本号
            fn: 迁移函数，接受旧版本草稿数据，返回新版本草稿数据
            form_type: 仅对该表单类型生效；为空时对全部表单生效

        Raises:
            ValueError: 同一表单类型同一版本重复注册
        """
        key = (form_type, from_version)
        if key in self._migrations:
            scope = form_type.value if form_type else "all forms"
            raise ValueError(
                f"Migration from version {from_version} already registered for {scope}"
            )
        self._migrations[key] = fn

    def migrate(
        self,
        data: Dict[str, Any],
        from_version: int,
        to_version: int,
        form_type: Optional[FormType] = None,
    ) -> Dict[str, Any]:
        """
        依次执行迁移，表单专属迁移优先于通用迁移

        Raises:
            ValueError: 缺少某个中间版本的迁移函数
        """
        result = data
        for version in range(from_version, to_version):
            fn = self._migrations.get((form_type, version)) if form_type else None
            if fn is None:
                fn = self._migrations.get((_ALL_FORMS, version))
            if fn is None:
                raise ValueError(
                    f"Missing migration from version {version} to {version + 1}"
                )
            result = fn(result)
        return result
