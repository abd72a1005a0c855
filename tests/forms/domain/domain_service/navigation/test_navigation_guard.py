"""
Tests for NavigationGuard

Feature: form-autosave, Property 5: 离开拦截
    check_unsaved_changes() 在 Clean 时恒为 True，在 Dirty 时等于用户选择
"""

from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings, strategies as st

from src.forms.domain.domain_service.navigation.navigation_guard import NavigationGuard
from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.value_object.config.navigation_guard_config import (
    DEFAULT_UNSAVED_CHANGES_MESSAGE,
    NavigationGuardConfig,
)
from src.forms.domain.value_object.form_type import FormType
from src.forms.domain.value_object.user import User
from src.forms.infrastructure.navigation.unload_guard_registry import UnloadGuardRegistry


def _make_guard(dirty=False, answer=True, config=None, user=True, router=True, host=None):
    session = AutoSaveSession(FormType.GAS_SAFETY)
    session.set_has_unsaved_changes(dirty)
    prompt = MagicMock()
    prompt.confirm.return_value = answer
    auth = MagicMock()
    auth.current_user.return_value = User(user_id="eng-7") if user else None
    guard = NavigationGuard(
        session=session,
        confirm_prompt=prompt,
        router=MagicMock() if router else None,
        unload_host=host,
        config=config,
        auth_provider=auth,
    )
    return guard, session, prompt


class TestNavigationGuardProperties:

    @settings(max_examples=100, deadline=None)
    @given(dirty=st.booleans(), answer=st.booleans())
    def test_check_result_matches_state_and_choice(self, dirty, answer):
        """
        Property 5: Clean 时不弹确认框并返回 True；Dirty 时返回用户选择
        """
        guard, _, prompt = _make_guard(dirty=dirty, answer=answer)

        result = guard.check_unsaved_changes()

        if dirty:
            prompt.confirm.assert_called_once_with(DEFAULT_UNSAVED_CHANGES_MESSAGE)
            assert result is answer
        else:
            prompt.confirm.assert_not_called()
            assert result is True


class TestNavigationGuardUnit:

    def test_navigate_when_clean(self):
        guard, _, prompt = _make_guard(dirty=False)

        assert guard.navigate_with_check("/dashboard") is True
        guard._router.navigate.assert_called_once_with("/dashboard")
        prompt.confirm.assert_not_called()

    def test_navigate_cancelled_keeps_dirty_state(self):
        guard, session, _ = _make_guard(dirty=True, answer=False)

        assert guard.navigate_with_check("/dashboard") is False
        guard._router.navigate.assert_not_called()
        assert session.has_unsaved_changes is True

    def test_navigate_confirmed_marks_session_clean(self):
        guard, session, _ = _make_guard(dirty=True, answer=True)

        assert guard.navigate_with_check("/invoices") is True
        guard._router.navigate.assert_called_once_with("/invoices")
        assert session.has_unsaved_changes is False

    def test_navigate_without_router_raises(self):
        guard, session, prompt = _make_guard(dirty=True, router=False)

        with pytest.raises(RuntimeError):
            guard.navigate_with_check("/dashboard")
        prompt.confirm.assert_not_called()
        assert session.has_unsaved_changes is True

    def test_disabled_guard_never_prompts(self):
        guard, _, prompt = _make_guard(
            dirty=True, config=NavigationGuardConfig(enabled=False)
        )

        assert guard.check_unsaved_changes() is True
        assert guard.should_block_unload() is False
        prompt.confirm.assert_not_called()

    def test_no_user_never_prompts(self):
        guard, _, prompt = _make_guard(dirty=True, user=False)

        assert guard.check_unsaved_changes() is True
        assert guard.should_block_unload() is False
        prompt.confirm.assert_not_called()

    def test_custom_message(self):
        guard, _, prompt = _make_guard(
            dirty=True, config=NavigationGuardConfig(message="Discard this record?")
        )
        guard.check_unsaved_changes()
        prompt.confirm.assert_called_once_with("Discard this record?")

    def test_unload_blocked_only_when_dirty(self):
        registry = UnloadGuardRegistry()
        guard, session, _ = _make_guard(dirty=False, host=registry)
        guard.attach()

        assert registry.dispatch_before_unload().default_prevented is False

        session.set_has_unsaved_changes(True)
        event = registry.dispatch_before_unload()
        assert event.default_prevented is True
        assert event.return_value == DEFAULT_UNSAVED_CHANGES_MESSAGE

    def test_attach_is_idempotent_and_detach_removes(self):
        registry = UnloadGuardRegistry()
        guard, _, _ = _make_guard(dirty=True, host=registry)

        guard.attach()
        guard.attach()
        assert registry.guard_count == 1
        assert guard.attached is True

        guard.detach()
        assert registry.guard_count == 0
        assert registry.dispatch_before_unload().default_prevented is False

    def test_session_close_detaches(self):
        registry = UnloadGuardRegistry()
        guard, session, _ = _make_guard(dirty=True, host=registry)
        guard.attach()

        session.close()

        assert registry.guard_count == 0
        assert guard.attached is False
        assert guard.should_block_unload() is False
