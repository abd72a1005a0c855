"""
PeeweeDraftStore - 基于 FormDraftRepository 的异步草稿存储

设计决策:
- peewee 是阻塞驱动，仓库调用提交到 ThreadPoolExecutor(max_workers=1) 执行，
  事件循环只 await 结果，会话状态始终只在事件循环线程上修改
- 单工作线程保证同一存储实例的写入按提交顺序执行
- 草稿归属当前登录用户，未登录时所有操作都是空操作
- save_draft 返回仓库的写入结果，内容为空未写入时为 False
- save_draft 失败时向上抛出，由调度器负责记录日志与提示；
  load/has 失败时记录日志并按"无草稿"处理
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from logging import Logger, getLogger
from typing import Callable, Optional, TypeVar

from src.forms.domain.interface.auth_provider import IAuthProvider
from src.forms.domain.interface.draft_store import IDraftStore
from src.forms.domain.value_object.form_snapshot import FormSnapshot
from src.forms.domain.value_object.form_type import FormType
from src.forms.infrastructure.persistence.form_draft_repository import (
    DraftNotFound,
    FormDraftRepository,
)

T = TypeVar("T")


class PeeweeDraftStore(IDraftStore):
    """异步草稿存储"""

    def __init__(
        self,
        repository: FormDraftRepository,
        auth_provider: IAuthProvider,
        logger: Optional[Logger] = None,
    ) -> None:
        self._repository = repository
        self._auth_provider = auth_provider
        self._logger = logger or getLogger(__name__)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="draft-store")

    def _user_id(self) -> Optional[str]:
        user = self._auth_provider.current_user()
        return user.user_id if user is not None else None

    async def _run(self, fn: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    async def save_draft(self, form_type: FormType, data: FormSnapshot) -> bool:
        user_id = self._user_id()
        if user_id is None:
            return False
        return await self._run(self._repository.save, user_id, FormType.parse(form_type), data)

    async def load_draft(self, form_type: FormType) -> Optional[FormSnapshot]:
        user_id = self._user_id()
        if user_id is None:
            return None
        try:
            result = await self._run(self._repository.load, user_id, FormType.parse(form_type))
        except Exception as e:
            self._logger.error(f"加载草稿失败 [{user_id}/{form_type}]: {e}", exc_info=True)
            return None
        if isinstance(result, DraftNotFound):
            return None
        return result

    async def delete_draft(self, form_type: FormType) -> None:
        user_id = self._user_id()
        if user_id is None:
            return
        await self._run(self._repository.delete, user_id, FormType.parse(form_type))

    async def has_draft(self, form_type: FormType) -> bool:
        user_id = self._user_id()
        if user_id is None:
            return False
        try:
            return await self._run(self._repository.exists, user_id, FormType.parse(form_type))
        except Exception as e:
            self._logger.error(f"检查草稿失败 [{user_id}/{form_type}]: {e}", exc_info=True)
            return False

    def shutdown(self) -> None:
        """等待已提交的写入完成后关闭线程池"""
        self._executor.shutdown(wait=True)
        self._logger.debug("PeeweeDraftStore 已关闭")
