"""Applicant Handlers — apply and submit-withdrawal operations.

Invariants:
    - Every precondition checked by enforce_operations before any mutation
    - Apply creates a PENDING BTO application and moves the applicant state machine
    - Submit withdrawal creates a PENDING withdrawal targeting the project application
    - Rejections returned as dicts with an error_code; the graph is unchanged on rejection

Design Decisions:
    - Officers use the same handlers (applicant capability), with the
      prohibited-project check guarding their own projects
"""

import logging

from bto.core.domain_types import APPLICANT_ROLES, ApplicationKind, FlatType
from bto.core.eligibility import eligible_flat_types
from bto.core.enforce_operations import validate_apply, validate_withdrawal
from bto.core.housing_graph import HousingGraph
from bto.core.results import ok
from bto.services.lookup_helpers import find_project, find_user

logger = logging.getLogger(__name__)


class ApplicantHandlers:
    """Applicant session operations over the shared graph."""

    def __init__(self, graph: HousingGraph):
        self.graph = graph

    def apply(self, user_id: str, project_id: str, flat_type: FlatType | None = None) -> dict:
        """Apply for a flat. Without flat_type, the smallest eligible type is chosen."""
        user, error = find_user(self.graph, user_id, *APPLICANT_ROLES)
        if error:
            return error
        project, error = find_project(self.graph, project_id)
        if error:
            return error
        error = validate_apply(user, project, flat_type)
        if error:
            logger.info(
                f"Apply rejected: {error['error_code']}",
                extra={"user_id": user_id, "project_id": project_id, "error_code": error["error_code"]},
            )
            return error

        eligible = eligible_flat_types(user, project)
        chosen = flat_type or next(t for t in FlatType if t in eligible)
        application = self.graph.add_application(
            ApplicationKind.BTO, user.id, project.id, flat_type=chosen,
        )
        user.applicant_state.record_application(project.id, application.id)
        logger.info(
            f"Applied for {chosen.value} in {project.id}",
            extra={"user_id": user.id, "application_id": application.id},
        )
        return ok(application_id=application.id, flat_type=chosen.value)

    def submit_withdrawal(self, user_id: str) -> dict:
        user, error = find_user(self.graph, user_id, *APPLICANT_ROLES)
        if error:
            return error
        error = validate_withdrawal(user)
        if error:
            return error

        state = user.applicant_state
        target = self.graph.applications.get(state.project_application_id)
        withdrawal = self.graph.add_application(
            ApplicationKind.WITHDRAWAL, user.id, target.project_id, target_id=target.id,
        )
        state.record_withdrawal(withdrawal.id)
        logger.info(
            f"Withdrawal requested for {target.id}",
            extra={"user_id": user.id, "application_id": withdrawal.id},
        )
        return ok(application_id=withdrawal.id, target_id=target.id)
