"""
run_draft_maintenance.py - 草稿维护命令

    python -m src.main.run_draft_maintenance --keep-days 30
    python -m src.main.run_draft_maintenance --list <user_id>
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.forms.infrastructure.persistence.draft_serializer import DraftSerializer
from src.forms.infrastructure.persistence.form_draft_repository import FormDraftRepository
from src.main.bootstrap.database_factory import DatabaseFactory
from src.main.bootstrap.database_setup import setup_draft_database
from src.main.bootstrap.logging_setup import setup_logging
from src.main.config.config_loader import ConfigLoader
from src.main.config.forms_config_loader import (
    DEFAULT_FORMS_CONFIG_PATH,
    draft_keep_days_from,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="表单草稿维护")
    parser.add_argument("--config", type=str, default=str(DEFAULT_FORMS_CONFIG_PATH), help="表单配置文件路径")
    parser.add_argument("--keep-days", type=int, default=None, help="保留最近 N 天内更新过的草稿 (默认读取配置)")
    parser.add_argument("--list", dest="list_user", type=str, default=None, help="列出指定用户的草稿")
    parser.add_argument("--sql-debug", action="store_true", help="输出 peewee SQL 日志")
    return parser


def run_draft_maintenance(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(sql_debug=args.sql_debug)

    config_path = Path(args.config)
    forms_config = {}
    if config_path.exists():
        forms_config = ConfigLoader.load_forms_config(str(config_path))
        ConfigLoader.validate_forms_config(forms_config)

    if not setup_draft_database():
        logger.error("数据库配置不完整，请检查 .env 中的 FORMS_DATABASE_* 配置")
        return 1

    repository = FormDraftRepository(
        serializer=DraftSerializer(),
        database_factory=DatabaseFactory.get_instance(),
        logger=logger,
    )

    if args.list_user:
        drafts = repository.list_drafts(args.list_user)
        if not drafts:
            print(f"用户 {args.list_user} 没有草稿")
        for draft in drafts:
            print(
                f"{draft['form_type'].label:<20} v{draft['schema_version']}  "
                f"updated {draft['updated_at']:%Y-%m-%d %H:%M}"
            )
        return 0

    keep_days = args.keep_days if args.keep_days is not None else draft_keep_days_from(forms_config)
    deleted = repository.cleanup(keep_days=keep_days)
    print(f"已清理 {deleted} 份超过 {keep_days} 天未更新的草稿")
    return 0


if __name__ == "__main__":
    sys.exit(run_draft_maintenance())
