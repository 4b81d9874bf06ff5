"""Manager Handlers — status decisions and project management.

Invariants:
    - Only the owning manager decides on applications of a project
    - update_status = FSM transition + per-variant side effects (status_transitions)
    - A manager handles at most one project per application period
    - Project deletion policy: REJECTED while any live application references
      the project; otherwise the project is detached from every officer and
      removed together with its closed applications and its enquiries
    - Project.officer_ids and OfficerState lists stay mutually consistent

Design Decisions:
    - Create/edit take plain typed arguments; the API schemas do field validation,
      the enforce_* checks do cross-entity validation
"""

import logging
from datetime import date

from bto.core.domain_types import (
    ApplicationKind, ApplicationStatus, FlatType, ID_PREFIXES, MAX_OFFICER_SLOTS,
    RecordKind, Role,
)
from bto.core.entities import Project
from bto.core.enforce_operations import (
    check_manager_window_free, check_no_active_applications, check_officer_slots_valid,
    check_project_owner, check_window_valid, validate_status_change,
)
from bto.core.housing_graph import HousingGraph
from bto.core.results import ok
from bto.services.lookup_helpers import find_application, find_project, find_user
from bto.services.status_transitions import apply_status_change

logger = logging.getLogger(__name__)


class ManagerHandlers:
    """Manager decisions over applications and owned projects."""

    def __init__(self, graph: HousingGraph):
        self.graph = graph

    def update_status(
        self, manager_id: str, application_id: str, target: ApplicationStatus,
    ) -> dict:
        manager, error = find_user(self.graph, manager_id, Role.MANAGER)
        if error:
            return error
        application, error = find_application(self.graph, application_id)
        if error:
            return error
        project = self.graph.projects.get(application.project_id)
        error = validate_status_change(manager, project, application, target) \
            or apply_status_change(self.graph, application, target)
        if error:
            logger.info(
                f"Status change rejected: {error['error_code']}",
                extra={"application_id": application_id, "error_code": error["error_code"]},
            )
            return error
        return ok(application_id=application.id, new_status=application.status.value)

    def create_project(
        self,
        manager_id: str,
        name: str,
        neighborhood: str,
        flat_units: dict[FlatType, int],
        flat_prices: dict[FlatType, int],
        open_date: date,
        close_date: date,
        officer_slots: int = MAX_OFFICER_SLOTS,
        visible: bool = True,
    ) -> dict:
        manager, error = find_user(self.graph, manager_id, Role.MANAGER)
        if error:
            return error
        error = (
            check_window_valid(open_date, close_date)
            or check_officer_slots_valid(officer_slots)
            or check_manager_window_free(self.graph, manager, open_date, close_date)
        )
        if error:
            return error

        project = Project(
            id=self.graph.projects.next_id(ID_PREFIXES[RecordKind.PROJECT]),
            name=name, neighborhood=neighborhood,
            flat_units=dict(flat_units), flat_prices=dict(flat_prices),
            open_date=open_date, close_date=close_date,
            manager_id=manager.id, officer_slots=officer_slots, visible=visible,
        )
        self.graph.projects.put(project.id, project)
        logger.info(f"Project {project.id} created", extra={"user_id": manager.id, "project_id": project.id})
        return ok(project_id=project.id)

    def edit_project(self, manager_id: str, project_id: str, **changes: object) -> dict:
        """Update any of name, neighborhood, flat_units, flat_prices, dates, officer_slots."""
        manager, project, error = self._owned_project(manager_id, project_id)
        if error:
            return error

        open_date = changes.get("open_date") or project.open_date
        close_date = changes.get("close_date") or project.close_date
        slots = changes.get("officer_slots") or project.officer_slots
        error = (
            check_window_valid(open_date, close_date)
            or check_officer_slots_valid(slots, project)
            or check_manager_window_free(
                self.graph, manager, open_date, close_date, exclude_id=project.id,
            )
        )
        if error:
            return error

        for field_name in ("name", "neighborhood", "flat_units", "flat_prices"):
            if changes.get(field_name) is not None:
                setattr(project, field_name, changes[field_name])
        project.open_date, project.close_date, project.officer_slots = open_date, close_date, slots
        logger.info(f"Project {project.id} edited", extra={"project_id": project.id})
        return ok(project_id=project.id)

    def set_visibility(self, manager_id: str, project_id: str, visible: bool) -> dict:
        _, project, error = self._owned_project(manager_id, project_id)
        if error:
            return error
        project.visible = visible
        return ok(project_id=project.id, visible=visible)

    def delete_project(self, manager_id: str, project_id: str) -> dict:
        _, project, error = self._owned_project(manager_id, project_id)
        if error:
            return error
        error = check_no_active_applications(self.graph, project)
        if error:
            return error

        applications = self.graph.applications_for_project(project.id)
        registration_ids = [
            a.id for a in applications if a.kind is ApplicationKind.REGISTRATION
        ]
        for officer in self.graph.users_with_role(Role.OFFICER):
            officer.officer_state.detach_project(project.id, registration_ids)
        for user in self.graph.users.all():
            state = user.applicant_state
            if state is not None and state.applied_project_id == project.id:
                state.release_application()
        for application in applications:
            self.graph.applications.remove(application.id)
        for enquiry in self.graph.enquiries_for_project(project.id):
            self.graph.enquiries.remove(enquiry.id)
        self.graph.projects.remove(project.id)

        logger.info(
            f"Project {project.id} deleted with {len(applications)} closed applications",
            extra={"project_id": project.id},
        )
        return ok(project_id=project.id, removed_applications=len(applications))

    def _owned_project(self, manager_id: str, project_id: str):
        manager, error = find_user(self.graph, manager_id, Role.MANAGER)
        if error:
            return None, None, error
        project, error = find_project(self.graph, project_id)
        if error:
            return None, None, error
        return manager, project, check_project_owner(manager, project)
