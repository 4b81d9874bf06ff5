"""Officer Handlers — tests for registration and booking.

Tests cover:
    - register creates a PENDING registration and prohibits the project
    - end-to-end registration with the exact window rule: a joined January
      project blocks a mid-January candidate but not a February one; a merely
      registered project blocks nothing
    - approval joins the project on both sides; rejection lifts the prohibition
    - officer slots cap approvals
    - booking: joined officer only, PENDING BTO only, units decremented
"""

from datetime import date

from bto.core.domain_types import ApplicationKind, ApplicationStatus, FlatType
from bto.core.entities import Project
from bto.services.handle_applicant import ApplicantHandlers
from bto.services.handle_manager import ManagerHandlers
from bto.services.handle_officer import OfficerHandlers


def _add_project(graph, project_id: str, open_date: date, close_date: date) -> Project:
    project = Project(
        id=project_id, name=project_id, neighborhood="Bedok",
        flat_units={FlatType.TWO_ROOM: 5}, flat_prices={FlatType.TWO_ROOM: 250000},
        open_date=open_date, close_date=close_date, manager_id="M2",
    )
    graph.projects.put(project.id, project)
    return project


def _join(graph, officer_id: str, project_id: str) -> None:
    registration_id = OfficerHandlers(graph).register(officer_id, project_id)["application_id"]
    manager_id = graph.projects.get(project_id).manager_id
    result = ManagerHandlers(graph).update_status(manager_id, registration_id, ApplicationStatus.SUCCESSFUL)
    assert result["status"] == "ok"


# ─── register ────────────────────────────────────────────────────

def test_register_creates_pending_registration(graph):
    result = OfficerHandlers(graph).register("O1", "P1")
    assert result["status"] == "ok"
    registration = graph.applications.get(result["application_id"])
    assert registration.kind is ApplicationKind.REGISTRATION
    assert registration.is_pending
    state = graph.users.get("O1").officer_state
    assert state.registered_project_ids == ["P1"]
    assert state.prohibited_project_ids == ["P1"]
    assert state.project_registration_ids == [registration.id]


def test_register_twice_rejected(graph):
    handlers = OfficerHandlers(graph)
    handlers.register("O1", "P1")
    assert handlers.register("O1", "P1")["error_code"] == "PROJECT_PROHIBITED"


def test_applicant_cannot_register(graph):
    assert OfficerHandlers(graph).register("U1", "P1")["error_code"] == "USER_NOT_FOUND"


def test_officer_who_applied_cannot_register(graph):
    ApplicantHandlers(graph).apply("O1", "P1")
    assert OfficerHandlers(graph).register("O1", "P1")["error_code"] == "APPLIED_AS_APPLICANT"


def test_registration_end_to_end_window_rule(graph):
    _join(graph, "O1", "P1")  # 01-01-2025 .. 31-01-2025
    mid_january = _add_project(graph, "Q", date(2025, 1, 15), date(2025, 1, 20))
    february = _add_project(graph, "R", date(2025, 2, 1), date(2025, 2, 28))
    handlers = OfficerHandlers(graph)

    assert handlers.register("O1", mid_january.id)["error_code"] == "WINDOW_CLASH"
    assert handlers.register("O1", february.id)["status"] == "ok"


def test_registered_only_project_does_not_block(graph):
    handlers = OfficerHandlers(graph)
    handlers.register("O1", "P1")
    mid_january = _add_project(graph, "Q", date(2025, 1, 15), date(2025, 1, 20))
    assert handlers.register("O1", mid_january.id)["status"] == "ok"


def test_approval_links_both_sides(graph):
    _join(graph, "O1", "P1")
    state = graph.users.get("O1").officer_state
    assert state.joined_project_ids == ["P1"]
    assert state.registered_project_ids == []
    assert state.is_prohibited("P1")
    assert graph.projects.get("P1").officer_ids == ["O1"]


def test_rejection_lifts_prohibition(graph):
    registration_id = OfficerHandlers(graph).register("O1", "P1")["application_id"]
    ManagerHandlers(graph).update_status("M1", registration_id, ApplicationStatus.UNSUCCESSFUL)
    state = graph.users.get("O1").officer_state
    assert not state.is_prohibited("P1")
    assert graph.projects.get("P1").officer_ids == []


def test_approval_blocked_when_slots_full(graph):
    graph.projects.get("P1").officer_slots = 1
    _join(graph, "O2", "P1")
    registration_id = OfficerHandlers(graph).register("O1", "P1")["application_id"]
    result = ManagerHandlers(graph).update_status("M1", registration_id, ApplicationStatus.SUCCESSFUL)
    assert result["error_code"] == "OFFICER_SLOTS_FULL"
    assert graph.applications.get(registration_id).is_pending


# ─── book_flat ───────────────────────────────────────────────────

def test_book_flat_decrements_units(graph):
    _join(graph, "O1", "P1")
    application_id = ApplicantHandlers(graph).apply("U2", "P1", FlatType.THREE_ROOM)["application_id"]

    result = OfficerHandlers(graph).book_flat("O1", application_id)

    assert result == {
        "status": "ok", "application_id": application_id,
        "flat_type": "3-Room", "units_left": 2,
    }
    assert graph.applications.get(application_id).status is ApplicationStatus.BOOKED
    state = graph.users.get("U2").applicant_state
    assert state.is_receipt_ready
    assert not state.can_apply


def test_book_flat_requires_joined_officer(graph):
    application_id = ApplicantHandlers(graph).apply("U2", "P1")["application_id"]
    result = OfficerHandlers(graph).book_flat("O2", application_id)
    assert result["error_code"] == "NOT_PROJECT_OFFICIAL"


def test_book_flat_no_units_left(graph):
    _join(graph, "O1", "P1")
    application_id = ApplicantHandlers(graph).apply("U2", "P1", FlatType.TWO_ROOM)["application_id"]
    graph.projects.get("P1").flat_units[FlatType.TWO_ROOM] = 0
    result = OfficerHandlers(graph).book_flat("O1", application_id)
    assert result["error_code"] == "NO_UNITS_LEFT"
    assert graph.applications.get(application_id).is_pending


def test_book_flat_rejects_registration(graph):
    registration_id = OfficerHandlers(graph).register("O2", "P1")["application_id"]
    result = OfficerHandlers(graph).book_flat("O1", registration_id)
    assert result["error_code"] == "NOT_A_BTO_APPLICATION"


def test_book_flat_twice_rejected(graph):
    _join(graph, "O1", "P1")
    application_id = ApplicantHandlers(graph).apply("U2", "P1")["application_id"]
    handlers = OfficerHandlers(graph)
    handlers.book_flat("O1", application_id)
    assert handlers.book_flat("O1", application_id)["error_code"] == "APPLICATION_NOT_PENDING"
