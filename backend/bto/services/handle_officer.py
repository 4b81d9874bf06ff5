"""Officer Handlers — project registration and flat booking.

Invariants:
    - register requires officer_can_register (not prohibited, no window clash)
      and that the officer has not applied for the project as an applicant
    - register appends to registered + prohibited and creates a PENDING
      registration listed in project_registration_ids
    - book_flat requires an officer who joined the application's project and a
      PENDING BTO application with a unit left; it moves the application to BOOKED

Design Decisions:
    - prohibited_project_ids updated incrementally (OfficerState.add_registration),
      never recomputed outside the Phase 2 resolver
"""

import logging

from bto.core.domain_types import ApplicationKind, ApplicationStatus, Role
from bto.core.enforce_operations import validate_booking, validate_registration
from bto.core.housing_graph import HousingGraph
from bto.core.results import ok
from bto.services.lookup_helpers import find_application, find_project, find_user
from bto.services.status_transitions import apply_status_change

logger = logging.getLogger(__name__)


class OfficerHandlers:
    """Officer membership and booking operations."""

    def __init__(self, graph: HousingGraph):
        self.graph = graph

    def register(self, officer_id: str, project_id: str) -> dict:
        officer, error = find_user(self.graph, officer_id, Role.OFFICER)
        if error:
            return error
        project, error = find_project(self.graph, project_id)
        if error:
            return error
        error = validate_registration(self.graph, officer, project)
        if error:
            logger.info(
                f"Registration rejected: {error['error_code']}",
                extra={"user_id": officer_id, "project_id": project_id, "error_code": error["error_code"]},
            )
            return error

        registration = self.graph.add_application(
            ApplicationKind.REGISTRATION, officer.id, project.id,
        )
        officer.officer_state.add_registration(project.id, registration.id)
        logger.info(
            f"Officer registered for {project.id}",
            extra={"user_id": officer.id, "application_id": registration.id},
        )
        return ok(application_id=registration.id)

    def book_flat(self, officer_id: str, application_id: str) -> dict:
        officer, error = find_user(self.graph, officer_id, Role.OFFICER)
        if error:
            return error
        application, error = find_application(self.graph, application_id)
        if error:
            return error
        project = self.graph.projects.get(application.project_id)
        error = validate_booking(officer, project, application) or apply_status_change(
            self.graph, application, ApplicationStatus.BOOKED,
        )
        if error:
            return error
        return ok(
            application_id=application.id,
            flat_type=application.flat_type.value,
            units_left=project.flat_units[application.flat_type],
        )
