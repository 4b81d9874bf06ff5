"""Applicant State — tests for the applicant session-state machine.

Tests cover:
    - Each transition method leaves the three invariants true
    - Releasing an application also drops a withdrawal awaiting decision
    - Withdrawal success resets, withdrawal rejection keeps the application
    - normalise() corrects inconsistent persisted flags and reports them
    - A withdrawing flag with no withdrawal application is cleared on load
"""

from bto.core.applicant_state import ApplicantState


def _invariants_hold(state: ApplicantState) -> bool:
    return (
        (state.applied_project_id is None or not state.can_apply)
        and (state.project_application_id is None or not state.can_apply)
        and ((state.withdrawal_application_id is not None) == state.is_withdrawing)
    )


def test_record_application():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    assert not state.can_apply
    assert state.has_active_application
    assert _invariants_hold(state)


def test_withdrawal_cycle_success():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    state.record_withdrawal("A-0002")
    assert state.is_withdrawing and _invariants_hold(state)
    state.complete_withdrawal()
    assert state.can_apply
    assert not state.is_withdrawing
    assert state.applied_project_id is None
    assert state.withdrawal_application_id is None
    assert _invariants_hold(state)


def test_withdrawal_rejected_keeps_application():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    state.record_withdrawal("A-0002")
    state.reject_withdrawal()
    assert not state.is_withdrawing
    assert state.project_application_id == "A-0001"
    assert not state.can_apply
    assert _invariants_hold(state)


def test_mark_booked_sets_receipt():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    state.mark_booked()
    assert state.is_receipt_ready
    assert not state.can_apply


def test_release_application():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    state.release_application()
    assert state.can_apply
    assert not state.has_active_application
    assert _invariants_hold(state)


def test_normalise_fixes_flags():
    state = ApplicantState(
        can_apply=True, is_withdrawing=False,
        applied_project_id="P1", project_application_id="A-0001",
        withdrawal_application_id="A-0002",
    )
    assert state.normalise() == ["can_apply", "is_withdrawing"]
    assert _invariants_hold(state)
    assert state.normalise() == []


def test_release_during_withdrawal_drops_it():
    state = ApplicantState()
    state.record_application("P1", "A-0001")
    state.record_withdrawal("A-0002")
    state.release_application()
    assert state.can_apply
    assert not state.is_withdrawing
    assert state.withdrawal_application_id is None
    assert _invariants_hold(state)

    state.record_application("P2", "A-0003")
    assert _invariants_hold(state)


def test_normalise_clears_withdrawing_without_application():
    state = ApplicantState(
        can_apply=False, is_withdrawing=True,
        applied_project_id="P1", project_application_id="A-0001",
    )
    assert state.normalise() == ["is_withdrawing"]
    assert not state.is_withdrawing
    assert _invariants_hold(state)
