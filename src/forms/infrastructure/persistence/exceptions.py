"""草稿持久化异常定义"""
from typing import List, Optional


class DraftPersistenceError(Exception):
    """草稿持久化异常基类"""


class DraftCorruptionError(DraftPersistenceError):
    """草稿记录存在但无法反序列化"""

    def __init__(self, user_id: str, form_type: str, original_error: Exception) -> None:
        self.user_id = user_id
        self.form_type = form_type
        self.original_error = original_error
        super().__init__(
            f"Draft for user '{user_id}' form '{form_type}' is corrupted. "
            f"Original error: {type(original_error).__name__}: {original_error}"
        )


class DatabaseConfigError(DraftPersistenceError):
    """数据库环境变量缺失或取值非法"""

    def __init__(self, missing_vars: List[str], message: Optional[str] = None) -> None:
        self.missing_vars = missing_vars
        super().__init__(
            message or f"Missing database environment variables: {', '.join(missing_vars)}"
        )


class DatabaseConnectionError(DraftPersistenceError):
    """数据库连接失败"""

    def __init__(self, driver: str, database: str, host: str = "", original_error: Optional[Exception] = None) -> None:
        self.driver = driver
        self.database = database
        self.host = host
        self.original_error = original_error
        location = f"{host}/{database}" if host else database
        super().__init__(
            f"Failed to connect to {driver} database '{location}': {original_error}"
        )
