"""Application Routes — apply, withdraw, register, decide, book.

Invariants:
    - GET /applications returns exactly visibility.applications_for(acting user)
    - Role capability checked before the handler runs (422, not 404, for the
      wrong role)
    - Every accepted mutation goes through commit() (autosave)
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from bto.api.dependencies import commit, current_user, get_graph, guard
from bto.core.domain_types import Role
from bto.core.enforce_operations import check_applicant_capability, check_role
from bto.core.entities import User
from bto.core.housing_graph import HousingGraph
from bto.core.visibility import applications_for
from bto.schemas.requests import ApplyRequest, RegisterRequest, StatusUpdate
from bto.schemas.views import ApplicationView
from bto.services.handle_applicant import ApplicantHandlers
from bto.services.handle_manager import ManagerHandlers
from bto.services.handle_officer import OfficerHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationView])
async def list_applications(
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return [ApplicationView.from_entity(a) for a in applications_for(graph, user)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def apply(
    body: ApplyRequest, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    """Apply for a flat in a project."""
    guard(check_applicant_capability(user))
    return commit(request, ApplicantHandlers(graph).apply(user.id, body.project_id, body.flat_type))


@router.post("/withdrawal", status_code=status.HTTP_201_CREATED)
async def submit_withdrawal(
    request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    """Request withdrawal of the acting user's current application."""
    guard(check_applicant_capability(user))
    return commit(request, ApplicantHandlers(graph).submit_withdrawal(user.id))


@router.post("/registrations", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    """Register the acting officer to handle a project."""
    guard(check_role(user, Role.OFFICER))
    return commit(request, OfficerHandlers(graph).register(user.id, body.project_id))


@router.put("/{application_id}/status")
async def update_status(
    application_id: str, body: StatusUpdate, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    return commit(request, ManagerHandlers(graph).update_status(user.id, application_id, body.status))


@router.post("/{application_id}/booking")
async def book_flat(
    application_id: str, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.OFFICER))
    return commit(request, OfficerHandlers(graph).book_flat(user.id, application_id))
