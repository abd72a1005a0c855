"""User 值对象 - 认证服务提供的当前用户身份"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """当前登录用户，草稿按 user_id 归属"""

    user_id: str
    email: Optional[str] = None
