"""Booking Report — tests for booked-flat reports and receipts.

Tests cover:
    - Only BOOKED BTO applications on the manager's own projects appear
    - Filters combine with AND
    - Receipts need BOOKED status and is_receipt_ready
"""

from bto.core.booking_report import ReportFilter, booking_receipt, booking_report
from bto.core.domain_types import ApplicationKind, ApplicationStatus, FlatType, MaritalStatus


def _book(graph, user_id: str, project_id: str, flat_type: FlatType):
    application = graph.add_application(ApplicationKind.BTO, user_id, project_id, flat_type=flat_type)
    application.status = ApplicationStatus.BOOKED
    state = graph.users.get(user_id).applicant_state
    state.record_application(project_id, application.id)
    state.mark_booked()
    return application


def test_report_lists_own_booked_applications(graph):
    booked = _book(graph, "U2", "P1", FlatType.THREE_ROOM)
    _book(graph, "U1", "P2", FlatType.TWO_ROOM)
    graph.add_application(ApplicationKind.BTO, "O2", "P1", flat_type=FlatType.TWO_ROOM)

    [row] = booking_report(graph, "M1")
    assert row["application_id"] == booked.id
    assert row["applicant_name"] == "Sarah"
    assert row["flat_type"] == "3-Room"
    assert row["price"] == 450000
    assert row["open_date"] == "01-01-2025"


def test_report_filters(graph):
    _book(graph, "U2", "P1", FlatType.THREE_ROOM)
    _book(graph, "U1", "P1", FlatType.TWO_ROOM)
    assert len(booking_report(graph, "M1")) == 2
    married = booking_report(graph, "M1", ReportFilter(marital_status=MaritalStatus.MARRIED))
    assert [r["applicant_id"] for r in married] == ["U2"]
    two_room = booking_report(graph, "M1", ReportFilter(flat_type=FlatType.TWO_ROOM))
    assert [r["applicant_id"] for r in two_room] == ["U1"]
    assert booking_report(graph, "M1", ReportFilter(min_age=36, max_age=39)) == []
    assert booking_report(graph, "M1", ReportFilter(project_id="P2")) == []


def test_manager_without_projects_gets_empty_report(graph):
    _book(graph, "U2", "P1", FlatType.THREE_ROOM)
    assert booking_report(graph, "M2") == []


def test_receipt_for_booked_application(graph):
    booked = _book(graph, "U2", "P1", FlatType.THREE_ROOM)
    result = booking_receipt(graph, booked.id)
    assert result["status"] == "ok"
    assert result["receipt"]["nric"] == "T7654321B"


def test_receipt_not_ready_for_pending(graph):
    application = graph.add_application(ApplicationKind.BTO, "U2", "P1", flat_type=FlatType.TWO_ROOM)
    assert booking_receipt(graph, application.id)["error_code"] == "RECEIPT_NOT_READY"


def test_receipt_unknown_application(graph):
    assert booking_receipt(graph, "A-9999")["error_code"] == "APPLICATION_NOT_FOUND"
