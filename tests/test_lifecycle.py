"""
Tests for the project lifecycle state machine.
"""

import itertools

import pytest

from bidflow.core.exceptions import InvalidStateException
from bidflow.engine.lifecycle import (
    ApmState,
    FlagPatch,
    GeneralState,
    LifecycleState,
    LifecycleView,
    ProjectFlags,
    available_transitions,
    derive_apm_state,
    derive_general_state,
    from_flags,
    remove_from_apm,
    request_transition,
    send_to_apm,
    to_flags,
)

ENROLLED = ProjectFlags(sent_to_apm=True)


def _moves():
    """Every operation a caller can issue, as (name, patch builder)."""
    moves = [(f"general:{s.value}", lambda f, s=s: request_transition(f, s)) for s in GeneralState]
    moves += [
        (f"apm:{s.value}", lambda f, s=s: request_transition(f, s, LifecycleView.APM))
        for s in ApmState
    ]
    moves += [("send_to_apm", send_to_apm), ("remove_from_apm", remove_from_apm)]
    return moves


class TestDerivation:

    def test_general_state(self):
        assert derive_general_state(ProjectFlags()) is GeneralState.ACTIVE
        assert derive_general_state(ProjectFlags(on_hold=True)) is GeneralState.ON_HOLD
        assert derive_general_state(ProjectFlags(archived=True)) is GeneralState.ARCHIVED

    def test_archived_wins_for_legacy_rows(self):
        assert derive_general_state(ProjectFlags(archived=True, on_hold=True)) is GeneralState.ARCHIVED
        flags = ProjectFlags(sent_to_apm=True, apm_archived=True, apm_on_hold=True)
        assert derive_apm_state(flags) is ApmState.ARCHIVED

    def test_apm_state_requires_enrollment(self):
        assert derive_apm_state(ProjectFlags(apm_on_hold=True)) is ApmState.NOT_ENROLLED
        assert derive_apm_state(ENROLLED) is ApmState.ACTIVE

    def test_state_round_trips_through_flags(self):
        for general in GeneralState:
            for apm in ApmState:
                state = LifecycleState(general=general, apm=apm)
                assert from_flags(to_flags(state)) == state


class TestTransitions:

    def test_archive_clears_on_hold(self):
        flags = ProjectFlags(on_hold=True)

        patch = request_transition(flags, GeneralState.ARCHIVED)

        assert patch.as_update() == {"archived": True, "on_hold": False}
        assert patch.apply(flags) == ProjectFlags(archived=True)

    def test_move_to_active_clears_both(self):
        patch = request_transition(ProjectFlags(archived=True), GeneralState.ACTIVE)

        assert patch.apply(ProjectFlags(archived=True)) == ProjectFlags()

    def test_apm_transition_requires_enrollment(self):
        with pytest.raises(InvalidStateException) as exc_info:
            request_transition(ProjectFlags(), ApmState.ARCHIVED, LifecycleView.APM, project_id=7)

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["project_id"] == 7

    def test_apm_transition_leaves_general_flags(self):
        flags = ProjectFlags(on_hold=True, sent_to_apm=True)

        patch = request_transition(flags, ApmState.ON_HOLD, LifecycleView.APM)

        assert patch.apply(flags) == ProjectFlags(on_hold=True, sent_to_apm=True, apm_on_hold=True)

    def test_target_must_match_view(self):
        with pytest.raises(InvalidStateException):
            request_transition(ENROLLED, ApmState.ARCHIVED, LifecycleView.GENERAL)
        with pytest.raises(InvalidStateException):
            request_transition(ENROLLED, GeneralState.ARCHIVED, LifecycleView.APM)

    def test_send_and_remove(self):
        flags = ProjectFlags(archived=True)

        enrolled = send_to_apm(flags).apply(flags)
        assert enrolled == ProjectFlags(archived=True, sent_to_apm=True)

        on_hold = request_transition(enrolled, ApmState.ON_HOLD, LifecycleView.APM).apply(enrolled)
        assert remove_from_apm(on_hold).apply(on_hold) == ProjectFlags(archived=True)

    def test_not_enrolled_target_removes_from_apm(self):
        flags = ProjectFlags(sent_to_apm=True, apm_archived=True)

        patch = request_transition(flags, ApmState.NOT_ENROLLED, LifecycleView.APM)

        assert patch.apply(flags) == ProjectFlags()

    def test_transitions_are_idempotent(self):
        for _, move in _moves():
            try:
                once = move(ENROLLED).apply(ENROLLED)
            except InvalidStateException:
                continue
            assert move(once).apply(once) == once

    def test_exclusivity_holds_for_any_sequence(self):
        starts = [to_flags(LifecycleState(g, a)) for g in GeneralState for a in ApmState]
        moves = _moves()

        for start, sequence in itertools.product(starts, itertools.product(moves, repeat=2)):
            flags = start
            for _, move in sequence:
                try:
                    flags = move(flags).apply(flags)
                except InvalidStateException:
                    continue
                assert not (flags.archived and flags.on_hold)
                assert not (flags.apm_archived and flags.apm_on_hold)


class TestFlagPatch:

    def test_rejects_both_general_flags(self):
        with pytest.raises(InvalidStateException):
            FlagPatch(archived=True, on_hold=True)

    def test_rejects_both_apm_flags(self):
        with pytest.raises(InvalidStateException):
            FlagPatch(apm_archived=True, apm_on_hold=True)

    def test_setting_one_flag_requires_clearing_its_partner(self):
        with pytest.raises(InvalidStateException):
            FlagPatch(on_hold=True)
        with pytest.raises(InvalidStateException):
            FlagPatch(archived=True)
        with pytest.raises(InvalidStateException):
            FlagPatch(apm_on_hold=True, apm_archived=None)

    def test_applied_patch_keeps_view_exclusive(self):
        archived = ProjectFlags(archived=True, sent_to_apm=True, apm_archived=True)

        flags = FlagPatch(archived=False, on_hold=True, apm_archived=False, apm_on_hold=True).apply(archived)

        assert flags == ProjectFlags(on_hold=True, sent_to_apm=True, apm_on_hold=True)

    def test_clearing_a_single_flag_is_allowed(self):
        assert FlagPatch(on_hold=False).as_update() == {"on_hold": False}

    def test_untouched_fields_are_omitted(self):
        assert FlagPatch(sent_to_apm=True).as_update() == {"sent_to_apm": True}
        assert FlagPatch().is_empty


class TestAvailableTransitions:

    def test_general_view_excludes_current(self):
        targets = available_transitions(ProjectFlags(on_hold=True), LifecycleView.GENERAL)

        assert targets == [GeneralState.ACTIVE, GeneralState.ARCHIVED]

    def test_unenrolled_project_can_only_be_sent(self):
        assert available_transitions(ProjectFlags(), LifecycleView.APM) == [ApmState.ACTIVE]

    def test_enrolled_project(self):
        targets = available_transitions(ProjectFlags(sent_to_apm=True, apm_archived=True), LifecycleView.APM)

        assert targets == [ApmState.NOT_ENROLLED, ApmState.ACTIVE, ApmState.ON_HOLD]
