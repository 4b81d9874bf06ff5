"""Booking Report — read-only views over BOOKED flat applications.

Invariants:
    - Only BTO applications in status BOOKED appear
    - A manager's report covers projects that manager owns
    - Filters combine with AND; None means "no filter"
    - Receipt available only when the applicant's is_receipt_ready flag is set

Design Decisions:
    - Rows are plain dicts: the display layer formats them, nothing here prints
"""

from dataclasses import dataclass

from bto.core.domain_types import ApplicationKind, ApplicationStatus, FlatType, MaritalStatus
from bto.core.entities import Application
from bto.core.housing_graph import HousingGraph
from bto.core.record_format import format_date
from bto.core.results import not_found, ok, rejected


@dataclass(frozen=True)
class ReportFilter:
    project_id: str | None = None
    flat_type: FlatType | None = None
    marital_status: MaritalStatus | None = None
    min_age: int | None = None
    max_age: int | None = None


def booking_row(graph: HousingGraph, application: Application) -> dict:
    """Applicant, project and flat details of one booking."""
    user = graph.users.get(application.user_id)
    project = graph.projects.get(application.project_id)
    flat_type = application.flat_type
    return {
        "application_id": application.id,
        "applicant_id": user.id,
        "applicant_name": user.name,
        "nric": user.nric,
        "age": user.age,
        "marital_status": user.marital_status.value,
        "project_id": project.id,
        "project_name": project.name,
        "neighborhood": project.neighborhood,
        "flat_type": flat_type.value if flat_type else None,
        "price": project.flat_prices.get(flat_type) if flat_type else None,
        "open_date": format_date(project.open_date),
        "close_date": format_date(project.close_date),
    }


def _matches(graph: HousingGraph, application: Application, f: ReportFilter) -> bool:
    user = graph.users.get(application.user_id)
    if f.project_id is not None and application.project_id != f.project_id:
        return False
    if f.flat_type is not None and application.flat_type is not f.flat_type:
        return False
    if f.marital_status is not None and user.marital_status is not f.marital_status:
        return False
    if f.min_age is not None and user.age < f.min_age:
        return False
    if f.max_age is not None and user.age > f.max_age:
        return False
    return True


def booking_report(
    graph: HousingGraph, manager_id: str, report_filter: ReportFilter | None = None,
) -> list[dict]:
    f = report_filter or ReportFilter()
    owned = {p.id for p in graph.projects_managed_by(manager_id)}
    return [
        booking_row(graph, a)
        for a in graph.applications.all()
        if a.kind is ApplicationKind.BTO
        and a.status is ApplicationStatus.BOOKED
        and a.project_id in owned
        and _matches(graph, a, f)
    ]


def booking_receipt(graph: HousingGraph, application_id: str) -> dict:
    """Receipt for a booked application, or a rejection."""
    application = graph.applications.get(application_id)
    if application is None:
        return not_found("Application", application_id)
    user = graph.users.get(application.user_id)
    if (
        application.status is not ApplicationStatus.BOOKED
        or user.applicant_state is None
        or not user.applicant_state.is_receipt_ready
    ):
        return rejected("RECEIPT_NOT_READY", f"Application {application_id} has no booking receipt.")
    return ok(receipt=booking_row(graph, application))
