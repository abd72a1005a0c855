"""
database_setup.py - 草稿数据库初始化

通过 DatabaseFactory 统一管理数据库初始化，并确保 form_drafts 表存在。
"""
import logging

from src.forms.infrastructure.persistence.exceptions import (
    DatabaseConfigError,
    DatabaseConnectionError,
)
from src.forms.infrastructure.persistence.form_draft_model import FormDraftModel
from src.main.bootstrap.database_factory import DatabaseFactory

logger = logging.getLogger(__name__)


def setup_draft_database(create_tables: bool = True) -> bool:
    """
    初始化草稿数据库连接

    Returns:
        True 如果初始化成功，False 如果配置不完整
    """
    try:
        factory = DatabaseFactory.get_instance()
        factory.initialize(eager=True)
    except DatabaseConfigError as e:
        logger.warning(f"数据库配置不完整: {e}")
        return False
    except DatabaseConnectionError as e:
        logger.error(f"数据库连接失败: {e}")
        raise
    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise

    if create_tables:
        db = factory.get_peewee_db()
        FormDraftModel._meta.database = db
        db.create_tables([FormDraftModel], safe=True)
        logger.info("form_drafts 表已就绪")
    return True
