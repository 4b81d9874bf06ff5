"""Record Serialization — graph -> flat rows, the inverse of hydrate + resolve.

Invariants:
    - Output rows use exactly the COLUMNS layout of record_format
    - References written as bare ids; ID lists ';'-joined in their in-memory order
    - Rows emitted in store insertion order
    - load_graph(serialize(g)) reproduces g (lossless round-trip)

Design Decisions:
    - Pure functions returning dicts, file IO left to infrastructure/record_files
      (mirrors the snapshot split: to_snapshot here, persistence in the shell)
"""

from bto.core.domain_types import RecordKind, Role, USER_RECORD_KINDS
from bto.core.entities import Application, Enquiry, Project, User
from bto.core.housing_graph import HousingGraph
from bto.core.repository_protocols import RecordSink
from bto.core.record_format import (
    format_bool, format_date, format_flat_map, format_id_list, format_optional,
)


def serialize_graph(graph: HousingGraph) -> dict[RecordKind, list[dict[str, str]]]:
    """Every record kind -> list of rows. Pure, no IO."""
    rows: dict[RecordKind, list[dict[str, str]]] = {kind: [] for kind in RecordKind}
    for user in graph.users.all():
        rows[USER_RECORD_KINDS[user.role]].append(user_to_row(user))
    rows[RecordKind.PROJECT] = [project_to_row(p) for p in graph.projects.all()]
    rows[RecordKind.APPLICATION] = [application_to_row(a) for a in graph.applications.all()]
    rows[RecordKind.ENQUIRY] = [enquiry_to_row(e) for e in graph.enquiries.all()]
    return rows


def write_graph(graph: HousingGraph, sink: RecordSink) -> None:
    """Hand every kind's rows to the sink, one whole file per kind."""
    for kind, kind_rows in serialize_graph(graph).items():
        sink.write(kind, kind_rows)


def user_to_row(user: User) -> dict[str, str]:
    row = {
        "id": user.id,
        "name": user.name,
        "nric": user.nric,
        "age": str(user.age),
        "marital_status": user.marital_status.value,
        "password": user.password,
    }
    if user.applicant_state is not None:
        state = user.applicant_state
        row.update({
            "can_apply": format_bool(state.can_apply),
            "is_withdrawing": format_bool(state.is_withdrawing),
            "is_receipt_ready": format_bool(state.is_receipt_ready),
            "applied_project": format_optional(state.applied_project_id),
            "project_application": format_optional(state.project_application_id),
            "withdrawal_application": format_optional(state.withdrawal_application_id),
        })
    if user.role is Role.OFFICER:
        state = user.officer_state
        row.update({
            "joined_projects": format_id_list(state.joined_project_ids),
            "registered_projects": format_id_list(state.registered_project_ids),
            "project_registrations": format_id_list(state.project_registration_ids),
        })
    return row


def project_to_row(project: Project) -> dict[str, str]:
    return {
        "id": project.id,
        "name": project.name,
        "neighborhood": project.neighborhood,
        "flat_units": format_flat_map(project.flat_units),
        "flat_prices": format_flat_map(project.flat_prices),
        "open_date": format_date(project.open_date),
        "close_date": format_date(project.close_date),
        "manager": project.manager_id,
        "officers": format_id_list(project.officer_ids),
        "officer_slots": str(project.officer_slots),
        "visible": format_bool(project.visible),
    }


def application_to_row(application: Application) -> dict[str, str]:
    return {
        "id": application.id,
        "kind": application.kind.value,
        "user": application.user_id,
        "project": application.project_id,
        "status": application.status.value,
        "sequence": str(application.sequence),
        "flat_type": application.flat_type.value if application.flat_type else "",
        "target": format_optional(application.target_id),
    }


def enquiry_to_row(enquiry: Enquiry) -> dict[str, str]:
    return {
        "id": enquiry.id,
        "user": enquiry.user_id,
        "project": enquiry.project_id,
        "message": enquiry.message,
        "reply": format_optional(enquiry.reply),
        "replied_by": format_optional(enquiry.replied_by),
    }
