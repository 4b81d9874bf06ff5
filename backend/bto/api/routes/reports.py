"""Report Routes — manager booking report and booking receipts.

Invariants:
    - The booking report covers only projects the acting manager owns
    - A receipt is readable by its applicant or by an official of the project
"""

from fastapi import APIRouter, Depends

from bto.api.dependencies import current_user, get_graph, guard, raise_for_rejection
from bto.core.booking_report import ReportFilter, booking_receipt, booking_report
from bto.core.domain_types import Role
from bto.core.enforce_operations import check_project_official, check_role
from bto.core.entities import User
from bto.core.housing_graph import HousingGraph
from bto.schemas.requests import BookingReportQuery
from bto.services.lookup_helpers import find_application

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/bookings")
async def bookings_report(
    query: BookingReportQuery = Depends(),
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    rows = booking_report(graph, user.id, ReportFilter(**query.model_dump()))
    return {"status": "ok", "count": len(rows), "bookings": rows}


@router.get("/receipts/{application_id}")
async def receipt(
    application_id: str,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    application, error = find_application(graph, application_id)
    guard(error)
    if application.user_id != user.id:
        guard(check_project_official(user, graph.projects.get(application.project_id)))
    return raise_for_rejection(booking_receipt(graph, application_id))
