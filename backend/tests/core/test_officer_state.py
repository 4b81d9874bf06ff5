"""Officer State — tests for the officer membership-state machine.

Tests cover:
    - add_registration appends to registered, prohibited and registration ids
    - approve moves registered -> joined, still prohibited
    - drop lifts the prohibition unless joined
    - prohibited ⊇ joined ∪ registered after every transition
"""

from bto.core.officer_state import OfficerState


def _superset_holds(state: OfficerState) -> bool:
    return set(state.prohibited_project_ids) >= (
        set(state.joined_project_ids) | set(state.registered_project_ids)
    )


def test_add_registration():
    state = OfficerState()
    state.add_registration("P1", "A-0001")
    state.add_registration("P1", "A-0001")
    assert state.registered_project_ids == ["P1"]
    assert state.prohibited_project_ids == ["P1"]
    assert state.project_registration_ids == ["A-0001"]


def test_approve_registration():
    state = OfficerState()
    state.add_registration("P1", "A-0001")
    state.approve_registration("P1")
    assert state.registered_project_ids == []
    assert state.joined_project_ids == ["P1"]
    assert state.is_prohibited("P1")
    assert _superset_holds(state)


def test_drop_registration_lifts_prohibition():
    state = OfficerState()
    state.add_registration("P1", "A-0001")
    state.drop_registration("P1")
    assert not state.is_prohibited("P1")
    assert _superset_holds(state)


def test_drop_registration_keeps_joined_prohibited():
    state = OfficerState()
    state.join("P1")
    state.add_registration("P1", "A-0002")
    state.drop_registration("P1")
    assert state.is_prohibited("P1")


def test_recompute_prohibited_is_union():
    state = OfficerState(joined_project_ids=["P2"], registered_project_ids=["P1", "P2"])
    state.recompute_prohibited()
    assert state.prohibited_project_ids == ["P2", "P1"]


def test_detach_project():
    state = OfficerState()
    state.add_registration("P1", "A-0001")
    state.approve_registration("P1")
    state.detach_project("P1", ["A-0001"])
    assert state == OfficerState()
