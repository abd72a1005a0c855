"""
Tests for DirtyTracker / AutoSaveSession

Feature: form-autosave, Property 1: 基线观察不产生未保存修改
"""

from datetime import datetime
from unittest.mock import MagicMock

from hypothesis import given, settings, strategies as st

from src.forms.domain.domain_service.autosave.dirty_tracker import DirtyTracker
from src.forms.domain.entity.auto_save_session import AutoSaveSession
from src.forms.domain.value_object.form_snapshot import snapshot_fingerprint
from src.forms.domain.value_object.form_type import FormType


_snapshots = st.dictionaries(
    keys=st.sampled_from(["customer", "address", "postcode", "engineer", "notes"]),
    values=st.one_of(st.text(max_size=15), st.integers(), st.none()),
    max_size=5,
)


class TestDirtyTrackerProperties:

    @settings(max_examples=200, deadline=None)
    @given(snapshot=_snapshots)
    def test_first_observation_is_baseline(self, snapshot):
        """第一次观察作为基线: 不视为修改"""
        session = AutoSaveSession(FormType.INVOICE)
        tracker = DirtyTracker(session)

        assert tracker.observe(snapshot) is False
        assert session.last_saved_snapshot == snapshot
        assert session.last_saved_fingerprint == snapshot_fingerprint(snapshot)
        assert session.successful_saves == 0

    @settings(max_examples=200, deadline=None)
    @given(baseline=_snapshots, edited=_snapshots)
    def test_dirty_iff_differs_from_baseline(self, baseline, edited):
        session = AutoSaveSession(FormType.INVOICE)
        tracker = DirtyTracker(session)
        tracker.observe(baseline)

        dirty = tracker.observe(edited)

        assert dirty == (snapshot_fingerprint(baseline) != snapshot_fingerprint(edited))
        # 回到基线后恢复 Clean
        assert tracker.observe(baseline) is False


class TestDirtyTrackerUnit:

    def test_listener_notified_on_dirty_transition_only(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        listener = MagicMock()
        session.add_listener(listener)
        tracker = DirtyTracker(session)

        tracker.observe({"customer": ""})
        tracker.observe({"customer": "A"})
        tracker.observe({"customer": "AB"})

        dirty_events = [c for c in listener.call_args_list if c.args[1] == "has_unsaved_changes"]
        assert len(dirty_events) == 1

    def test_caller_mutation_does_not_leak_into_session(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        tracker = DirtyTracker(session)
        data = {"appliances": [{"make": "Worcester"}]}

        tracker.observe(data)
        data["appliances"][0]["make"] = "Vaillant"

        assert session.last_saved_snapshot == {"appliances": [{"make": "Worcester"}]}
        assert tracker.current_snapshot == {"appliances": [{"make": "Worcester"}]}

    def test_refresh_after_save(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        tracker = DirtyTracker(session)
        tracker.observe({"notes": ""})
        tracker.observe({"notes": "done"})
        assert session.has_unsaved_changes is True

        session.complete_save(
            {"notes": "done"}, snapshot_fingerprint({"notes": "done"}), datetime(2026, 1, 1)
        )
        assert tracker.refresh() is False

    def test_has_baseline(self):
        tracker = DirtyTracker(AutoSaveSession(FormType.GAS_SAFETY))
        assert tracker.has_baseline is False
        assert tracker.differs_from_saved() is False
        tracker.observe({})
        assert tracker.has_baseline is True


class TestAutoSaveSessionUnit:

    def test_single_flight_flag(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        assert session.begin_save() is True
        assert session.begin_save() is False
        session.end_save()
        assert session.begin_save() is True

    def test_close_is_idempotent_and_freezes_state(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        listener = MagicMock()
        session.add_listener(listener)

        session.close()
        session.close()
        session.set_has_unsaved_changes(True)
        session.disable_auto_save()

        listener.assert_called_once_with(session, "closed")
        assert session.closed is True
        assert session.has_unsaved_changes is False
        assert session.auto_save_enabled is True
        assert session.begin_save() is False

    def test_reset_save_state(self):
        session = AutoSaveSession(FormType.GAS_SAFETY)
        session.complete_save({"a": 1}, "fp", datetime(2026, 1, 1))
        session.set_has_unsaved_changes(True)

        session.reset_save_state()

        assert session.last_saved_at is None
        assert session.has_unsaved_changes is False

    def test_form_type_parsed_from_string(self):
        assert AutoSaveSession("service_checklist").form_type is FormType.SERVICE_CHECKLIST
