"""View Schemas — response shapes for entities leaving the API.

Invariants:
    - Passwords never serialized
    - Dates rendered in the record file format (DD-MM-YYYY)
    - Applicant/officer state exposed only on the user's own profile

Design Decisions:
    - from_entity classmethods keep the core entities free of API concerns
"""

from pydantic import BaseModel

from bto.core.entities import Application, Enquiry, Project, User
from bto.core.record_format import format_date


class ProjectView(BaseModel):
    id: str
    name: str
    neighborhood: str
    flat_units: dict[str, int]
    flat_prices: dict[str, int]
    open_date: str
    close_date: str
    manager_id: str
    officer_ids: list[str]
    officer_slots: int
    visible: bool

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectView":
        return cls(
            id=project.id, name=project.name, neighborhood=project.neighborhood,
            flat_units={t.value: n for t, n in project.flat_units.items()},
            flat_prices={t.value: n for t, n in project.flat_prices.items()},
            open_date=format_date(project.open_date),
            close_date=format_date(project.close_date),
            manager_id=project.manager_id, officer_ids=list(project.officer_ids),
            officer_slots=project.officer_slots, visible=project.visible,
        )


class ApplicationView(BaseModel):
    id: str
    kind: str
    user_id: str
    project_id: str
    status: str
    sequence: int
    flat_type: str | None = None
    target_id: str | None = None

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationView":
        flat_type = application.flat_type
        return cls(
            id=application.id, kind=application.kind.value,
            user_id=application.user_id, project_id=application.project_id,
            status=application.status.value, sequence=application.sequence,
            flat_type=flat_type.value if flat_type else None,
            target_id=application.target_id,
        )


class EnquiryView(BaseModel):
    id: str
    user_id: str
    project_id: str
    message: str
    reply: str | None = None
    replied_by: str | None = None

    @classmethod
    def from_entity(cls, enquiry: Enquiry) -> "EnquiryView":
        return cls(
            id=enquiry.id, user_id=enquiry.user_id, project_id=enquiry.project_id,
            message=enquiry.message, reply=enquiry.reply, replied_by=enquiry.replied_by,
        )


class ProfileView(BaseModel):
    """The acting user's own profile, including role state."""
    id: str
    name: str
    nric: str
    age: int
    marital_status: str
    role: str
    applicant_state: dict | None = None
    officer_state: dict | None = None

    @classmethod
    def from_entity(cls, user: User) -> "ProfileView":
        applicant = user.applicant_state
        officer = user.officer_state
        return cls(
            id=user.id, name=user.name, nric=user.nric, age=user.age,
            marital_status=user.marital_status.value, role=user.role.value,
            applicant_state=None if applicant is None else {
                "can_apply": applicant.can_apply,
                "is_withdrawing": applicant.is_withdrawing,
                "is_receipt_ready": applicant.is_receipt_ready,
                "applied_project_id": applicant.applied_project_id,
                "project_application_id": applicant.project_application_id,
                "withdrawal_application_id": applicant.withdrawal_application_id,
            },
            officer_state=None if officer is None else {
                "joined_project_ids": list(officer.joined_project_ids),
                "registered_project_ids": list(officer.registered_project_ids),
                "prohibited_project_ids": list(officer.prohibited_project_ids),
                "project_registration_ids": list(officer.project_registration_ids),
            },
        )
