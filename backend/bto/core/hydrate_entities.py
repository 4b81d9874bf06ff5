"""Entity Hydration — Phase 1 of the load pipeline.

Invariants:
    - Kinds hydrate in fixed order: users (applicant, officer, manager) -> projects
      -> applications -> enquiries
    - A kind may look up entities of EARLIER kinds only
    - Required reference absent => record skipped + MISSING_REQUIRED_REFERENCE diagnostic
      (Project: manager; Application: user + project; Enquiry: filer + project)
    - Malformed primitive field => record skipped + RECORD_FORMAT_ERROR diagnostic
    - Optional references are left unset; Phase 2 resolves them
    - DuplicateKeyError propagates: fatal to the load step
    - Requires stage UNLOADED; leaves stage HYDRATED

Design Decisions:
    - One builder function per kind, each raising on a bad record; the loop
      around it owns isolation so no builder needs its own try/except
"""

import logging
from collections.abc import Callable

from bto.core.domain_types import (
    APPLICANT_ROLES, ApplicationKind, ApplicationStatus, FlatType,
    LoadStage, MaritalStatus, RecordKind, Role, MAX_OFFICER_SLOTS, is_valid_nric,
)
from bto.core.entities import Application, Enquiry, Project, User, new_user
from bto.core.errors import MissingRequiredReferenceError, RecordFormatError
from bto.core.housing_graph import HousingGraph
from bto.core.record_format import (
    field_value, parse_bool, parse_date, parse_enum, parse_flat_map,
    parse_int, parse_optional, parse_required,
)
from bto.core.repository_protocols import RecordSource

logger = logging.getLogger(__name__)

_USER_KINDS: tuple[tuple[RecordKind, Role], ...] = (
    (RecordKind.APPLICANT, Role.APPLICANT),
    (RecordKind.OFFICER, Role.OFFICER),
    (RecordKind.MANAGER, Role.MANAGER),
)

# Which roles may file each application variant
_APPLICATION_ROLES: dict[ApplicationKind, frozenset[Role]] = {
    ApplicationKind.BTO: APPLICANT_ROLES,
    ApplicationKind.WITHDRAWAL: APPLICANT_ROLES,
    ApplicationKind.REGISTRATION: frozenset({Role.OFFICER}),
}


def hydrate(graph: HousingGraph, source: RecordSource) -> HousingGraph:
    """Build every store from primitive fields. Returns the same graph."""
    graph.require_stage(LoadStage.UNLOADED)

    for kind, role in _USER_KINDS:
        _hydrate_kind(graph, source, kind, lambda r, role=role: _build_user(r, role), graph.users.put)
    _hydrate_kind(
        graph, source, RecordKind.PROJECT,
        lambda r: _build_project(graph, r), graph.projects.put,
    )
    _hydrate_kind(
        graph, source, RecordKind.APPLICATION,
        lambda r: _build_application(graph, r), graph.applications.put,
    )
    _hydrate_kind(
        graph, source, RecordKind.ENQUIRY,
        lambda r: _build_enquiry(graph, r), graph.enquiries.put,
    )

    graph.advance(LoadStage.UNLOADED, LoadStage.HYDRATED)
    logger.info(
        f"Hydrated {len(graph.users)} users, {len(graph.projects)} projects, "
        f"{len(graph.applications)} applications, {len(graph.enquiries)} enquiries",
    )
    return graph


def _hydrate_kind(
    graph: HousingGraph,
    source: RecordSource,
    kind: RecordKind,
    build: Callable[[dict], object],
    put: Callable[[str, object], None],
) -> None:
    """Build and store each record of one kind; isolate per-record failures."""
    for index, record in enumerate(source.records(kind), start=1):
        record_id = field_value(record, "id") or f"<row {index}>"
        try:
            entity = build(record)
        except (RecordFormatError, MissingRequiredReferenceError) as e:
            graph.record_diagnostic(kind, record_id, e)
            continue
        put(entity.id, entity)


# --- Builders -----------------------------------------------------------------

def _build_user(record: dict, role: Role) -> User:
    nric = parse_required(record, "nric")
    if not is_valid_nric(nric):
        raise RecordFormatError(f"Invalid NRIC format: {nric!r}", "nric")
    age = parse_int(record, "age")
    if age < 0:
        raise RecordFormatError(f"Age cannot be negative: {age}", "age")

    user = new_user(
        user_id=parse_required(record, "id"),
        name=parse_required(record, "name"),
        nric=nric,
        age=age,
        marital_status=parse_enum(record, "marital_status", MaritalStatus),
        role=role,
        password=field_value(record, "password") or "password",
    )
    if user.applicant_state is not None:
        state = user.applicant_state
        state.can_apply = parse_bool(record, "can_apply", default=True)
        state.is_withdrawing = parse_bool(record, "is_withdrawing")
        state.is_receipt_ready = parse_bool(record, "is_receipt_ready")
    return user


def _build_project(graph: HousingGraph, record: dict) -> Project:
    manager_id = parse_required(record, "manager")
    if graph.user_with_role(manager_id, Role.MANAGER) is None:
        raise MissingRequiredReferenceError("manager", manager_id)

    open_date = parse_date(record, "open_date")
    close_date = parse_date(record, "close_date")
    if close_date < open_date:
        raise RecordFormatError("close_date is before open_date", "close_date")
    slots = parse_int(record, "officer_slots") if field_value(record, "officer_slots") \
        else MAX_OFFICER_SLOTS

    return Project(
        id=parse_required(record, "id"),
        name=parse_required(record, "name"),
        neighborhood=field_value(record, "neighborhood"),
        flat_units=parse_flat_map(record, "flat_units"),
        flat_prices=parse_flat_map(record, "flat_prices"),
        open_date=open_date,
        close_date=close_date,
        manager_id=manager_id,
        officer_slots=slots,
        visible=parse_bool(record, "visible", default=True),
    )


def _build_application(graph: HousingGraph, record: dict) -> Application:
    kind = parse_enum(record, "kind", ApplicationKind)
    user_id = parse_required(record, "user")
    if graph.user_with_role(user_id, *_APPLICATION_ROLES[kind]) is None:
        raise MissingRequiredReferenceError("user", user_id)
    project_id = parse_required(record, "project")
    if project_id not in graph.projects:
        raise MissingRequiredReferenceError("project", project_id)

    flat_type = None
    if field_value(record, "flat_type"):
        flat_type = parse_enum(record, "flat_type", FlatType)

    return Application(
        id=parse_required(record, "id"),
        kind=kind,
        user_id=user_id,
        project_id=project_id,
        status=parse_enum(record, "status", ApplicationStatus),
        sequence=parse_int(record, "sequence") if field_value(record, "sequence") else 0,
        flat_type=flat_type,
    )


def _build_enquiry(graph: HousingGraph, record: dict) -> Enquiry:
    user_id = parse_required(record, "user")
    if user_id not in graph.users:
        raise MissingRequiredReferenceError("user", user_id)
    project_id = parse_required(record, "project")
    if project_id not in graph.projects:
        raise MissingRequiredReferenceError("project", project_id)

    return Enquiry(
        id=parse_required(record, "id"),
        user_id=user_id,
        project_id=project_id,
        message=parse_required(record, "message"),
        reply=parse_optional(record, "reply"),
        replied_by=parse_optional(record, "replied_by"),
    )
