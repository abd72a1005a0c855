"""
FormType 值对象 - 表单类型枚举

系统中可编辑、可自动保存草稿的表单种类是一个封闭集合:
- gas_safety: 燃气安全证书
- invoice: 发票
- service_checklist: 维保检查清单

枚举值即草稿表中 form_type 字段的存储值，不可随意修改。
"""
from enum import Enum


class FormType(Enum):
    """表单类型枚举"""

    GAS_SAFETY = "gas_safety"
    INVOICE = "invoice"
    SERVICE_CHECKLIST = "service_checklist"

    @property
    def label(self) -> str:
        """面向用户的表单名称"""
        labels = {
            FormType.GAS_SAFETY: "Gas Safety Record",
            FormType.INVOICE: "Invoice",
            FormType.SERVICE_CHECKLIST: "Service Checklist",
        }
        return labels[self]

    @classmethod
    def parse(cls, value: "FormType | str") -> "FormType":
        """
        将字符串或枚举转换为 FormType

        Raises:
            ValueError: 未知的表单类型
        """
        if isinstance(value, FormType):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"未知的表单类型: {value!r} (可选: {valid})") from None
