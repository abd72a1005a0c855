"""IAuthProvider 接口 - 当前用户身份"""
from abc import ABC, abstractmethod
from typing import Optional

from src.forms.domain.value_object.user import User


class IAuthProvider(ABC):
    """认证服务接口。未登录时返回 None，自动保存与离开拦截随之失效。"""

    @abstractmethod
    def current_user(self) -> Optional[User]:
        ...
