"""Applicant Handlers — tests for apply and withdrawal, end to end.

Tests cover:
    - apply picks the smallest eligible type and moves the applicant state
    - apply rejections: already applied, no eligible type, wrong type, hidden,
      prohibited (officer), unknown project, non-applicant role
    - apply -> submit withdrawal -> manager approves -> applicant reset
    - withdrawal rejected keeps the original application
"""

from bto.core.domain_types import ApplicationKind, ApplicationStatus, FlatType
from bto.services.handle_applicant import ApplicantHandlers
from bto.services.handle_manager import ManagerHandlers


# ─── apply ───────────────────────────────────────────────────────

def test_apply_defaults_to_smallest_eligible_type(graph):
    result = ApplicantHandlers(graph).apply("U2", "P1")
    assert result["status"] == "ok"
    assert result["flat_type"] == "2-Room"

    application = graph.applications.get(result["application_id"])
    assert application.kind is ApplicationKind.BTO
    assert application.status is ApplicationStatus.PENDING
    assert application.sequence == 1
    state = graph.users.get("U2").applicant_state
    assert state.applied_project_id == "P1"
    assert state.project_application_id == application.id
    assert not state.can_apply


def test_apply_with_explicit_type(graph):
    result = ApplicantHandlers(graph).apply("U2", "P1", FlatType.THREE_ROOM)
    assert result["flat_type"] == "3-Room"


def test_apply_twice_rejected(graph):
    handlers = ApplicantHandlers(graph)
    handlers.apply("U1", "P1")
    result = handlers.apply("U1", "P2")
    assert result["error_code"] == "ALREADY_APPLIED"
    assert len(graph.applications) == 1


def test_single_under_35_cannot_apply(graph):
    assert ApplicantHandlers(graph).apply("U3", "P1")["error_code"] == "NO_ELIGIBLE_FLAT_TYPE"


def test_single_cannot_pick_three_room(graph):
    result = ApplicantHandlers(graph).apply("U1", "P1", FlatType.THREE_ROOM)
    assert result["error_code"] == "FLAT_TYPE_NOT_ELIGIBLE"
    assert graph.users.get("U1").applicant_state.can_apply


def test_sold_out_type_not_eligible(graph):
    result = ApplicantHandlers(graph).apply("U2", "P2", FlatType.THREE_ROOM)
    assert result["error_code"] == "FLAT_TYPE_NOT_ELIGIBLE"


def test_hidden_project_rejected(graph):
    graph.projects.get("P1").visible = False
    assert ApplicantHandlers(graph).apply("U2", "P1")["error_code"] == "PROJECT_NOT_VISIBLE"


def test_officer_cannot_apply_for_own_project(graph):
    graph.link_officer(graph.users.get("O1"), graph.projects.get("P1"))
    assert ApplicantHandlers(graph).apply("O1", "P1")["error_code"] == "PROJECT_PROHIBITED"
    assert ApplicantHandlers(graph).apply("O1", "P2")["status"] == "ok"


def test_unknown_project_and_manager(graph):
    handlers = ApplicantHandlers(graph)
    assert handlers.apply("U2", "P404")["error_code"] == "PROJECT_NOT_FOUND"
    assert handlers.apply("M1", "P1")["error_code"] == "USER_NOT_FOUND"


# ─── withdrawal ──────────────────────────────────────────────────

def test_withdrawal_without_application_rejected(graph):
    result = ApplicantHandlers(graph).submit_withdrawal("U2")
    assert result["error_code"] == "NO_ACTIVE_APPLICATION"


def test_withdrawal_twice_rejected(graph):
    handlers = ApplicantHandlers(graph)
    handlers.apply("U2", "P1")
    handlers.submit_withdrawal("U2")
    assert handlers.submit_withdrawal("U2")["error_code"] == "WITHDRAWAL_ALREADY_PENDING"


def test_apply_withdraw_approve_end_to_end(graph):
    applicants = ApplicantHandlers(graph)
    manager = ManagerHandlers(graph)

    application_id = applicants.apply("U2", "P1")["application_id"]
    withdrawal = applicants.submit_withdrawal("U2")
    assert withdrawal["target_id"] == application_id
    state = graph.users.get("U2").applicant_state
    assert state.is_withdrawing
    assert state.withdrawal_application_id == withdrawal["application_id"]

    result = manager.update_status("M1", withdrawal["application_id"], ApplicationStatus.SUCCESSFUL)
    assert result == {
        "status": "ok",
        "application_id": withdrawal["application_id"],
        "new_status": "Successful",
    }
    assert state.can_apply
    assert not state.is_withdrawing
    assert state.applied_project_id is None
    assert state.project_application_id is None
    assert state.withdrawal_application_id is None
    assert graph.applications.get(application_id).status is ApplicationStatus.WITHDRAWN

    assert applicants.apply("U2", "P2")["status"] == "ok"


def test_withdrawal_rejected_keeps_application(graph):
    applicants = ApplicantHandlers(graph)
    application_id = applicants.apply("U2", "P1")["application_id"]
    withdrawal_id = applicants.submit_withdrawal("U2")["application_id"]

    result = ManagerHandlers(graph).update_status("M1", withdrawal_id, ApplicationStatus.UNSUCCESSFUL)
    assert result["status"] == "ok"
    state = graph.users.get("U2").applicant_state
    assert not state.is_withdrawing
    assert state.project_application_id == application_id
    assert graph.applications.get(application_id).is_pending
    assert applicants.submit_withdrawal("U2")["status"] == "ok"


def test_withdrawal_after_booking_resets_applicant(graph):
    applicants = ApplicantHandlers(graph)
    manager = ManagerHandlers(graph)
    application_id = applicants.apply("U2", "P1", FlatType.THREE_ROOM)["application_id"]
    manager.update_status("M1", application_id, ApplicationStatus.BOOKED)
    withdrawal_id = applicants.submit_withdrawal("U2")["application_id"]

    manager.update_status("M1", withdrawal_id, ApplicationStatus.SUCCESSFUL)

    state = graph.users.get("U2").applicant_state
    assert state.can_apply
    assert not state.is_receipt_ready
    assert graph.applications.get(application_id).status is ApplicationStatus.BOOKED
