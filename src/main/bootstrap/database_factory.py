"""
database_factory.py - 草稿数据库工厂

从环境变量 (.env) 读取连接配置，创建 peewee 数据库实例。
进程内单例，支持延迟初始化与立即连接两种模式。

环境变量:
    FORMS_DATABASE_DRIVER     sqlite | mysql | postgresql
    FORMS_DATABASE_DATABASE   数据库名 (sqlite 为文件路径)
    FORMS_DATABASE_HOST       服务端数据库主机 (sqlite 不需要)
    FORMS_DATABASE_PORT       端口，可选
    FORMS_DATABASE_USER       用户名 (sqlite 不需要)
    FORMS_DATABASE_PASSWORD   密码 (sqlite 不需要)
"""
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from peewee import Database, MySQLDatabase, PostgresqlDatabase, SqliteDatabase

from src.forms.infrastructure.persistence.exceptions import (
    DatabaseConfigError,
    DatabaseConnectionError,
)

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = [
    "FORMS_DATABASE_DRIVER",
    "FORMS_DATABASE_DATABASE",
]

SERVER_ENV_VARS = [
    "FORMS_DATABASE_HOST",
    "FORMS_DATABASE_USER",
    "FORMS_DATABASE_PASSWORD",
]

SUPPORTED_DRIVERS = ("sqlite", "mysql", "postgresql")

_DEFAULT_PORTS = {"mysql": 3306, "postgresql": 5432}


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


class DatabaseFactory:
    """草稿数据库工厂 (单例)"""

    _instance: Optional["DatabaseFactory"] = None

    def __init__(self) -> None:
        self._peewee_db: Optional[Database] = None
        self._initialized: bool = False

    @classmethod
    def get_instance(cls) -> "DatabaseFactory":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @staticmethod
    def validate_env_vars() -> List[str]:
        """
        检查环境变量，返回缺失 (未设置、空字符串或仅空白) 的变量名列表

        服务端驱动 (mysql / postgresql) 额外要求 HOST、USER、PASSWORD。
        """
        missing = [var for var in REQUIRED_ENV_VARS if not _env(var)]
        driver = _env("FORMS_DATABASE_DRIVER").lower()
        if driver and driver != "sqlite":
            missing.extend(var for var in SERVER_ENV_VARS if not _env(var))
        return missing

    def initialize(self, eager: bool = False, load_env: bool = True) -> None:
        """
        初始化工厂

        Args:
            eager: True 时立即建立连接，连接失败抛出 DatabaseConnectionError
            load_env: 是否先加载 .env 文件

        Raises:
            DatabaseConfigError: 环境变量缺失或驱动不受支持
            DatabaseConnectionError: eager 模式下连接失败
        """
        if load_env:
            load_dotenv()

        missing = self.validate_env_vars()
        if missing:
            raise DatabaseConfigError(missing_vars=missing)

        driver = _env("FORMS_DATABASE_DRIVER").lower()
        if driver not in SUPPORTED_DRIVERS:
            raise DatabaseConfigError(
                missing_vars=[],
                message=f"Unsupported FORMS_DATABASE_DRIVER: {driver} (expected one of {', '.join(SUPPORTED_DRIVERS)})",
            )

        self._initialized = True
        if eager:
            self._connect()

    def _build_peewee_db(self) -> Database:
        driver = _env("FORMS_DATABASE_DRIVER").lower()
        database = _env("FORMS_DATABASE_DATABASE")

        if driver == "sqlite":
            return SqliteDatabase(database, pragmas={"journal_mode": "wal", "foreign_keys": 1})

        port = _env("FORMS_DATABASE_PORT")
        kwargs = {
            "host": _env("FORMS_DATABASE_HOST"),
            "port": int(port) if port else _DEFAULT_PORTS[driver],
            "user": _env("FORMS_DATABASE_USER"),
            "password": _env("FORMS_DATABASE_PASSWORD"),
        }
        if driver == "mysql":
            return MySQLDatabase(database, charset="utf8mb4", **kwargs)
        return PostgresqlDatabase(database, **kwargs)

    def _connect(self) -> Database:
        driver = _env("FORMS_DATABASE_DRIVER").lower()
        database = _env("FORMS_DATABASE_DATABASE")
        host = _env("FORMS_DATABASE_HOST")
        try:
            db = self._build_peewee_db()
            db.connect(reuse_if_open=True)
        except Exception as e:
            self._peewee_db = None
            raise DatabaseConnectionError(
                driver=driver, database=database, host=host, original_error=e
            ) from e

        self._peewee_db = db
        location = f"{host}/{database}" if host else database
        logger.info(f"草稿数据库已连接: {driver} {location}")
        return db

    def get_peewee_db(self) -> Database:
        """获取 peewee 数据库实例，未初始化时先初始化 (延迟连接)"""
        if not self._initialized:
            self.initialize()
        if self._peewee_db is None:
            return self._connect()
        return self._peewee_db

    def reset(self) -> None:
        """关闭连接并清除单例 (测试与重新加载配置时使用)"""
        if self._peewee_db is not None:
            try:
                self._peewee_db.close()
            except Exception as e:
                logger.warning(f"关闭数据库连接失败: {e}")
        self._peewee_db = None
        self._initialized = False
        DatabaseFactory._instance = None
