"""
DraftRestoration - 草稿恢复

编辑页面打开时检查是否存在上一次会话遗留的草稿，并由用户选择:
- 恢复 (restore): 把草稿内容交给页面填充表单
- 丢弃 (discard): 删除存储中的草稿，并重置会话的保存记录
- 忽略 (dismiss): 仅关闭提示，草稿保留

加载草稿出错时视为没有草稿，只记录日志。
"""
from logging import Logger, getLogger
from typing import Callable, Optional

from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.interface.draft_store import IDraftStore
from src.forms.domain.value_object.form_snapshot import FormSnapshot, copy_snapshot
from src.forms.domain.value_object.form_type import FormType


class DraftRestoration:
    """草稿恢复提示"""

    def __init__(
        self,
        form_type: FormType | str,
        draft_store: IDraftStore,
        session: Optional[AutoSaveSession] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._form_type = FormType.parse(form_type)
        self._draft_store = draft_store
        self._session = session
        self._logger = logger or getLogger(__name__)
        self._draft: Optional[FormSnapshot] = None
        self._prompt_visible = False
        self._loading = False

    @property
    def draft(self) -> Optional[FormSnapshot]:
        return self._draft

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def prompt_visible(self) -> bool:
        return self._prompt_visible and not self._loading and self._draft is not None

    @property
    def prompt_message(self) -> str:
        return (
            f"We found a saved draft of your {self._form_type.label.lower()} "
            f"from your previous session. "
            f"Would you like to restore it and continue where you left off?"
        )

    async def check_for_draft(self) -> Optional[FormSnapshot]:
        """加载草稿，存在时显示恢复提示"""
        self._loading = True
        try:
            draft = await self._draft_store.load_draft(self._form_type)
        except Exception as e:
            self._logger.error(
                f"检查草稿失败 [{self._form_type.value}]: {e}", exc_info=True
            )
            draft = None
        finally:
            self._loading = False

        if draft:
            self._draft = draft
            self._prompt_visible = True
        return draft

    def restore(self, on_restore: Callable[[FormSnapshot], None]) -> bool:
        """把草稿内容交给页面，返回是否执行了恢复"""
        if self._draft is None:
            return False
        on_restore(copy_snapshot(self._draft))
        self._prompt_visible = False
        self._logger.info(f"已恢复草稿 [{self._form_type.value}]")
        return True

    async def discard(self, on_discard: Optional[Callable[[], None]] = None) -> bool:
        """
        丢弃草稿

        Returns:
            删除失败时返回 False，提示保持显示
        """
        try:
            await self._draft_store.delete_draft(self._form_type)
        except Exception as e:
            self._logger.error(
                f"丢弃草稿失败 [{self._form_type.value}]: {e}", exc_info=True
            )
            return False

        if self._session is not None:
            self._session.reset_save_state()
        if on_discard is not None:
            on_discard()
        self._draft = None
        self._prompt_visible = False
        return True

    def dismiss(self) -> None:
        self._prompt_visible = False
