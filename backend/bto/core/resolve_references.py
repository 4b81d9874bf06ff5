"""Reference Resolution — Phase 2 of the load pipeline.

Invariants:
    - Runs only on a HYDRATED graph; leaves it RESOLVED
    - Every entity of every kind already exists, so any id can be looked up
    - Unresolvable optional reference => field nulled (or id dropped from a list)
      + UNRESOLVED_OPTIONAL_REFERENCE diagnostic; the pass continues
    - Records whose entity was dropped in Phase 1 are ignored
    - Officer <-> project membership linked on both sides
    - prohibited_project_ids recomputed from scratch here and nowhere else
    - Each list is taken from its own record first, so reordering records
      within a kind yields an identical graph

Design Decisions:
    - Resolution checks type as well as existence: an applicant's
      project_application must be that applicant's own BTO application
    - Applicant flags normalised after resolution so persisted inconsistencies
      cannot break the state-machine invariants
"""

import logging

from bto.core.domain_types import (
    ApplicationKind, LoadStage, OFFICIAL_ROLES, RecordKind, Role,
)
from bto.core.entities import User
from bto.core.errors import UnresolvedOptionalReferenceError
from bto.core.housing_graph import HousingGraph
from bto.core.record_format import field_value, parse_id_list
from bto.core.repository_protocols import RecordSource

logger = logging.getLogger(__name__)

_APPLICANT_KINDS: tuple[tuple[RecordKind, Role], ...] = (
    (RecordKind.APPLICANT, Role.APPLICANT),
    (RecordKind.OFFICER, Role.OFFICER),
)


def resolve(graph: HousingGraph, source: RecordSource) -> HousingGraph:
    """Wire every ID reference Phase 1 left unset. Returns the same graph."""
    graph.require_stage(LoadStage.HYDRATED)

    for kind, role in _APPLICANT_KINDS:
        for record in source.records(kind):
            user = graph.user_with_role(field_value(record, "id"), role)
            if user is None:
                continue
            _resolve_applicant_references(graph, kind, user, record)
            if role is Role.OFFICER:
                _resolve_officer_lists(graph, user, record)

    for record in source.records(RecordKind.PROJECT):
        _resolve_project_officers(graph, record)
    _link_joined_projects(graph)
    for officer in graph.users_with_role(Role.OFFICER):
        officer.officer_state.recompute_prohibited()

    for record in source.records(RecordKind.APPLICATION):
        _resolve_withdrawal_target(graph, record)
    for record in source.records(RecordKind.ENQUIRY):
        _resolve_enquiry_reply(graph, record)

    graph.advance(LoadStage.HYDRATED, LoadStage.RESOLVED)
    logger.info(f"Resolved references ({len(graph.diagnostics)} load diagnostics)")
    return graph


def _unresolved(
    graph: HousingGraph, kind: RecordKind, record_id: str, field_name: str, target: str,
) -> None:
    graph.record_diagnostic(
        kind, record_id, UnresolvedOptionalReferenceError(field_name, target),
    )


# --- Applicants & officers ----------------------------------------------------

def _resolve_applicant_references(
    graph: HousingGraph, kind: RecordKind, user: User, record: dict,
) -> None:
    state = user.applicant_state

    project_id = field_value(record, "applied_project") or None
    if project_id and project_id not in graph.projects:
        _unresolved(graph, kind, user.id, "applied_project", project_id)
        project_id = None
    state.applied_project_id = project_id

    state.project_application_id = _own_application(
        graph, kind, user, record, "project_application", ApplicationKind.BTO,
    )
    state.withdrawal_application_id = _own_application(
        graph, kind, user, record, "withdrawal_application", ApplicationKind.WITHDRAWAL,
    )

    corrected = state.normalise()
    if corrected:
        logger.warning(
            f"{kind.value} '{user.id}': corrected inconsistent flags {corrected}",
            extra={"record_kind": kind.value, "record_id": user.id},
        )


def _own_application(
    graph: HousingGraph, kind: RecordKind, user: User, record: dict,
    column: str, expected: ApplicationKind,
) -> str | None:
    """Resolve an application id that must belong to `user` and be of `expected` kind."""
    application_id = field_value(record, column)
    if not application_id:
        return None
    application = graph.applications.get(application_id)
    if application is None or application.user_id != user.id or application.kind is not expected:
        _unresolved(graph, kind, user.id, column, application_id)
        return None
    return application_id


def _resolve_officer_lists(graph: HousingGraph, officer: User, record: dict) -> None:
    state = officer.officer_state
    state.joined_project_ids = _existing_projects(graph, officer, record, "joined_projects")
    state.registered_project_ids = _existing_projects(
        graph, officer, record, "registered_projects",
    )

    registrations = []
    for application_id in parse_id_list(record, "project_registrations"):
        application = graph.applications.get(application_id)
        if (
            application is None
            or application.user_id != officer.id
            or application.kind is not ApplicationKind.REGISTRATION
        ):
            _unresolved(graph, RecordKind.OFFICER, officer.id, "project_registrations", application_id)
            continue
        registrations.append(application_id)
    state.project_registration_ids = registrations


def _existing_projects(
    graph: HousingGraph, officer: User, record: dict, column: str,
) -> list[str]:
    resolved = []
    for project_id in parse_id_list(record, column):
        if project_id not in graph.projects:
            _unresolved(graph, RecordKind.OFFICER, officer.id, column, project_id)
            continue
        resolved.append(project_id)
    return resolved


# --- Projects -----------------------------------------------------------------

def _resolve_project_officers(graph: HousingGraph, record: dict) -> None:
    project = graph.projects.get(field_value(record, "id"))
    if project is None:
        return
    officer_ids = []
    for officer_id in parse_id_list(record, "officers"):
        if graph.user_with_role(officer_id, Role.OFFICER) is None:
            _unresolved(graph, RecordKind.PROJECT, project.id, "officers", officer_id)
            continue
        officer_ids.append(officer_id)
    project.officer_ids = officer_ids


def _link_joined_projects(graph: HousingGraph) -> None:
    """Make both sides of officer<->project membership agree.

    Project lists were taken from project records and officer lists from
    officer records; link_officer only appends what one side is missing.
    Pairs are linked in (project id, officer id) order, so the appended
    entries never depend on the order records arrived in.
    """
    pairs = {
        (project.id, officer_id)
        for project in graph.projects.all()
        for officer_id in project.officer_ids
    } | {
        (project_id, officer.id)
        for officer in graph.users_with_role(Role.OFFICER)
        for project_id in officer.officer_state.joined_project_ids
    }
    for project_id, officer_id in sorted(pairs):
        graph.link_officer(graph.users.get(officer_id), graph.projects.get(project_id))


# --- Applications & enquiries -------------------------------------------------

def _resolve_withdrawal_target(graph: HousingGraph, record: dict) -> None:
    application = graph.applications.get(field_value(record, "id"))
    target_id = field_value(record, "target")
    if application is None or not target_id:
        return
    target = graph.applications.get(target_id)
    if (
        application.kind is not ApplicationKind.WITHDRAWAL
        or target is None
        or target.kind is not ApplicationKind.BTO
        or target.user_id != application.user_id
    ):
        _unresolved(graph, RecordKind.APPLICATION, application.id, "target", target_id)
        return
    application.target_id = target_id


def _resolve_enquiry_reply(graph: HousingGraph, record: dict) -> None:
    enquiry = graph.enquiries.get(field_value(record, "id"))
    if enquiry is None or enquiry.replied_by is None:
        return
    if graph.user_with_role(enquiry.replied_by, *OFFICIAL_ROLES) is None:
        _unresolved(graph, RecordKind.ENQUIRY, enquiry.id, "replied_by", enquiry.replied_by)
        enquiry.replied_by = None
