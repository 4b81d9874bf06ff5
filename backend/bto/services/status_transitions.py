"""Status Transitions — FSM step plus the per-variant side effects.

Invariants:
    - The FSM decides legality; side effects run only after a legal transition
    - BTO BOOKED: one unit of the flat type consumed, applicant receipt ready
    - BTO UNSUCCESSFUL/WITHDRAWN: applicant released (may apply again); a PENDING
      withdrawal of it closes too (SUCCESSFUL if WITHDRAWN, else UNSUCCESSFUL)
    - REGISTRATION SUCCESSFUL: registered -> joined, officer added to the project
    - REGISTRATION UNSUCCESSFUL/WITHDRAWN: registration dropped, prohibition lifted
      unless the project is joined
    - WITHDRAWAL SUCCESSFUL: applicant reset; a PENDING target becomes WITHDRAWN
    - WITHDRAWAL UNSUCCESSFUL: withdrawal cleared, original application stands
    - A withdrawal touches the applicant state only while it targets the
      applicant's current application

Design Decisions:
    - Shared by manager status updates and officer bookings so both paths
      produce identical side effects
    - A non-PENDING withdrawal target keeps its terminal status (the FSM has no
      exit from it); only the applicant state is reset
"""

import logging

from bto.core.application_fsm import transition
from bto.core.domain_types import ApplicationKind, ApplicationStatus
from bto.core.entities import Application
from bto.core.housing_graph import HousingGraph

logger = logging.getLogger(__name__)


def apply_status_change(
    graph: HousingGraph, application: Application, target: ApplicationStatus,
) -> dict | None:
    """Transition + side effects. Returns the FSM rejection or None."""
    error = transition(application, target)
    if error:
        return error

    effects = {
        ApplicationKind.BTO: _on_bto_change,
        ApplicationKind.REGISTRATION: _on_registration_change,
        ApplicationKind.WITHDRAWAL: _on_withdrawal_change,
    }
    effects[application.kind](graph, application, target)
    logger.info(
        f"{application.kind.value} application {application.id} -> {target.value}",
        extra={"application_id": application.id, "project_id": application.project_id},
    )
    return None


def _on_bto_change(
    graph: HousingGraph, application: Application, target: ApplicationStatus,
) -> None:
    state = graph.users.get(application.user_id).applicant_state
    if target is ApplicationStatus.BOOKED:
        project = graph.projects.get(application.project_id)
        project.flat_units[application.flat_type] -= 1
        state.mark_booked()
    elif target in (ApplicationStatus.UNSUCCESSFUL, ApplicationStatus.WITHDRAWN):
        _close_pending_withdrawals(graph, application, target)
        if state.project_application_id == application.id:
            state.release_application()


def _close_pending_withdrawals(
    graph: HousingGraph, application: Application, target: ApplicationStatus,
) -> None:
    """Settle withdrawals still pending against a BTO application that just closed."""
    outcome = (
        ApplicationStatus.SUCCESSFUL if target is ApplicationStatus.WITHDRAWN
        else ApplicationStatus.UNSUCCESSFUL
    )
    for withdrawal in graph.applications_of(application.user_id, ApplicationKind.WITHDRAWAL):
        if withdrawal.target_id == application.id and withdrawal.is_pending:
            transition(withdrawal, outcome)
            logger.info(
                f"Withdrawal {withdrawal.id} closed with {application.id} -> {outcome.value}",
                extra={"application_id": withdrawal.id, "project_id": withdrawal.project_id},
            )


def _on_registration_change(
    graph: HousingGraph, application: Application, target: ApplicationStatus,
) -> None:
    officer = graph.users.get(application.user_id)
    project = graph.projects.get(application.project_id)
    if target is ApplicationStatus.SUCCESSFUL:
        officer.officer_state.approve_registration(project.id)
        graph.link_officer(officer, project)
    else:
        officer.officer_state.drop_registration(project.id)


def _on_withdrawal_change(
    graph: HousingGraph, application: Application, target: ApplicationStatus,
) -> None:
    state = graph.users.get(application.user_id).applicant_state
    is_current = (
        state.withdrawal_application_id == application.id
        and application.target_id == state.project_application_id
    )
    if target is ApplicationStatus.UNSUCCESSFUL:
        if is_current:
            state.reject_withdrawal()
        return

    withdrawn = graph.applications.get(application.target_id)
    if is_current:
        state.complete_withdrawal()
    if withdrawn is not None and withdrawn.is_pending:
        transition(withdrawn, ApplicationStatus.WITHDRAWN)
