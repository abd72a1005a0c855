"""表单草稿仓库 - 基于 form_drafts 表的 JSON 存储。

职责:
- 保存草稿 (同一用户同一表单类型覆盖更新，保留 created_at)
- 跳过没有有效内容的草稿，避免只含默认值的表单写入数据库
- 加载草稿，区分"无记录"(DraftNotFound) 和"记录损坏"(DraftCorruptionError)
- 验证记录完整性 (JSON 可解析且包含 schema_version 与 data)
- 删除草稿、列出用户草稿、清理长期未更新的草稿
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from logging import Logger
from typing import Any, Dict, List, Optional, Union

from src.forms.domain.value_object.form_snapshot import FormSnapshot, has_meaningful_data
from src.forms.domain.value_object.form_type import FormType
from src.forms.infrastructure.persistence.draft_serializer import DraftSerializer
from src.forms.infrastructure.persistence.exceptions import DraftCorruptionError
from src.forms.infrastructure.persistence.form_draft_model import FormDraftModel


@dataclass
class DraftNotFound:
    """表示数据库中无该草稿记录的结果类型"""

    user_id: str
    form_type: FormType


class FormDraftRepository:
    """表单草稿仓库"""

    def __init__(
        self,
        serializer: DraftSerializer,
        database_factory: Any,
        logger: Optional[Logger] = None,
    ) -> None:
        self._serializer = serializer
        self._database_factory = database_factory
        self._logger = logger

    def _bind(self):
        db = self._database_factory.get_peewee_db()
        FormDraftModel._meta.database = db
        return db

    def _select(self, user_id: str, form_type: FormType):
        return FormDraftModel.select().where(
            (FormDraftModel.user_id == user_id)
            & (FormDraftModel.form_type == form_type.value)
        )

    def save(self, user_id: str, form_type: FormType | str, data: FormSnapshot) -> bool:
        """
        保存草稿

        Returns:
            False 表示草稿没有有效内容，未写入数据库
        """
        form_type = FormType.parse(form_type)
        if not has_meaningful_data(data):
            if self._logger:
                self._logger.debug(f"草稿无有效内容，跳过保存: {user_id}/{form_type.value}")
            return False

        json_str = self._serializer.serialize(form_type, data)
        now = datetime.now()

        db = self._bind()
        with db.atomic():
            updated = (
                FormDraftModel.update(
                    form_data=json_str,
                    schema_version=self._serializer.current_version,
                    updated_at=now,
                )
                .where(
                    (FormDraftModel.user_id == user_id)
                    & (FormDraftModel.form_type == form_type.value)
                )
                .execute()
            )
            if not updated:
                FormDraftModel.create(
                    user_id=user_id,
                    form_type=form_type.value,
                    form_data=json_str,
                    schema_version=self._serializer.current_version,
                    created_at=now,
                    updated_at=now,
                )

        if self._logger:
            self._logger.info(f"草稿已保存: {user_id}/{form_type.value}")
        return True

    def load(
        self, user_id: str, form_type: FormType | str
    ) -> Union[FormSnapshot, DraftNotFound]:
        """
        加载草稿

        - 无记录 → 返回 DraftNotFound
        - 记录存在但 JSON 反序列化失败 → 抛出 DraftCorruptionError
        - 成功 → 返回表单数据
        """
        form_type = FormType.parse(form_type)
        self._bind()

        record = self._select(user_id, form_type).first()
        if record is None:
            if self._logger:
                self._logger.info(f"未找到草稿: {user_id}/{form_type.value}")
            return DraftNotFound(user_id=user_id, form_type=form_type)

        try:
            data = self._serializer.deserialize(record.form_data)
        except Exception as e:
            raise DraftCorruptionError(
                user_id=user_id, form_type=form_type.value, original_error=e
            ) from e

        if self._logger:
            self._logger.info(f"草稿已加载: {user_id}/{form_type.value}")
        return data

    def exists(self, user_id: str, form_type: FormType | str) -> bool:
        form_type = FormType.parse(form_type)
        self._bind()
        return self._select(user_id, form_type).exists()

    def delete(self, user_id: str, form_type: FormType | str) -> int:
        """删除草稿，返回删除的记录数"""
        form_type = FormType.parse(form_type)
        self._bind()
        deleted = (
            FormDraftModel.delete()
            .where(
                (FormDraftModel.user_id == user_id)
                & (FormDraftModel.form_type == form_type.value)
            )
            .execute()
        )
        if self._logger:
            self._logger.info(f"草稿已删除: {user_id}/{form_type.value} ({deleted} 条)")
        return deleted

    def verify_integrity(self, user_id: str, form_type: FormType | str) -> bool:
        """验证记录完整性：检查 JSON 可解析且包含 schema_version 和 data。"""
        form_type = FormType.parse(form_type)
        self._bind()

        record = self._select(user_id, form_type).first()
        if record is None:
            return False

        try:
            parsed = json.loads(record.form_data)
        except (json.JSONDecodeError, TypeError):
            return False

        return isinstance(parsed, dict) and "schema_version" in parsed and "data" in parsed

    def list_drafts(self, user_id: str) -> List[Dict[str, Any]]:
        """列出用户全部草稿的元信息 (不反序列化内容)"""
        self._bind()
        query = (
            FormDraftModel.select(
                FormDraftModel.form_type,
                FormDraftModel.schema_version,
                FormDraftModel.created_at,
                FormDraftModel.updated_at,
            )
            .where(FormDraftModel.user_id == user_id)
            .order_by(FormDraftModel.updated_at.desc())
        )
        return [
            {
                "form_type": FormType.parse(row.form_type),
                "schema_version": row.schema_version,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
            for row in query
        ]

    def cleanup(self, keep_days: int = 30) -> int:
        """清理旧草稿。删除 updated_at 早于 keep_days 天前的记录。返回删除的记录数。"""
        self._bind()
        cutoff = datetime.now() - timedelta(days=keep_days)

        deleted = (
            FormDraftModel.delete()
            .where(FormDraftModel.updated_at < cutoff)
            .execute()
        )

        if self._logger:
            self._logger.info(f"清理旧草稿: 删除 {deleted} 条记录 (keep_days={keep_days})")
        return deleted
