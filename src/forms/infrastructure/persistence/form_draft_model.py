"""
FormDraftModel - form_drafts 表 peewee 模型

每个 (user_id, form_type) 只保留一份草稿，保存时覆盖更新。
数据库在运行时由 FormDraftRepository 绑定到 _meta.database。
"""
from datetime import datetime

from peewee import CharField, DateTimeField, IntegerField, Model, TextField


class FormDraftModel(Model):
    """表单草稿记录"""

    user_id = CharField(max_length=64, index=True)
    form_type = CharField(max_length=32)
    form_data = TextField()
    schema_version = IntegerField(default=1)
    created_at = DateTimeField(default=datetime.now)
    updated_at = DateTimeField(default=datetime.now, index=True)

    class Meta:
        table_name = "form_drafts"
        indexes = (
            (("user_id", "form_type"), True),
        )
