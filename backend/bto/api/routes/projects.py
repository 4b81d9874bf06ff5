"""Project Routes — role-scoped listing and manager project management.

Invariants:
    - GET /projects returns exactly visibility.projects_for(acting user)
    - GET /projects/handled returns the projects the acting official runs
    - Create/edit/visibility/delete run through ManagerHandlers (owner checks there)
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from bto.api.dependencies import commit, current_user, get_graph, guard
from bto.config import get_settings
from bto.core.domain_types import Role
from bto.core.enforce_operations import check_role
from bto.core.entities import User
from bto.core.housing_graph import HousingGraph
from bto.core.visibility import handled_projects_for, projects_for
from bto.schemas.requests import ProjectCreate, ProjectEdit, VisibilityUpdate
from bto.schemas.views import ProjectView
from bto.services.handle_manager import ManagerHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=list[ProjectView])
async def list_projects(
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return [ProjectView.from_entity(p) for p in projects_for(graph, user)]


@router.get("/handled", response_model=list[ProjectView])
async def list_handled_projects(
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return [ProjectView.from_entity(p) for p in handled_projects_for(graph, user)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    slots = body.officer_slots or get_settings().default_officer_slots
    return commit(request, ManagerHandlers(graph).create_project(
        user.id, body.name, body.neighborhood, body.flat_units, body.flat_prices,
        body.open_date, body.close_date, officer_slots=slots, visible=body.visible,
    ))


@router.patch("/{project_id}")
async def edit_project(
    project_id: str, body: ProjectEdit, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    changes = body.model_dump(exclude_none=True)
    return commit(request, ManagerHandlers(graph).edit_project(user.id, project_id, **changes))


@router.put("/{project_id}/visibility")
async def set_visibility(
    project_id: str, body: VisibilityUpdate, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    return commit(request, ManagerHandlers(graph).set_visibility(user.id, project_id, body.visible))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    guard(check_role(user, Role.MANAGER))
    return commit(request, ManagerHandlers(graph).delete_project(user.id, project_id))
