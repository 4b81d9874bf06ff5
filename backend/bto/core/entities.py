"""Entities — the nodes of the in-memory housing graph.

Invariants:
    - Identity is the string id; equality is field-wise (dataclass eq)
    - Cross-entity references are IDs, never object pointers
    - applicant_state present iff role has the applicant capability
    - officer_state present iff role is OFFICER

Design Decisions:
    - One User dataclass with a role tag and optional state components instead
      of an Applicant/Officer/Manager class hierarchy (ADR: sum-type dispatch)
    - Project.officer_ids is the reverse side of OfficerState.joined_project_ids;
      only HousingGraph.link_officer touches both
"""

from dataclasses import dataclass, field
from datetime import date

from bto.core.applicant_state import ApplicantState
from bto.core.domain_types import (
    APPLICANT_ROLES, OFFICIAL_ROLES,
    ApplicationKind, ApplicationStatus, FlatType, MaritalStatus, Role,
)
from bto.core.officer_state import OfficerState


@dataclass
class User:
    id: str
    name: str
    nric: str
    age: int
    marital_status: MaritalStatus
    role: Role
    password: str = "password"
    applicant_state: ApplicantState | None = None
    officer_state: OfficerState | None = None

    @property
    def is_official(self) -> bool:
        """Officers and managers can manage/reply to enquiries of their projects."""
        return self.role in OFFICIAL_ROLES

    @property
    def is_applicant(self) -> bool:
        """Applicants and officers can apply for flats."""
        return self.role in APPLICANT_ROLES


def new_user(
    user_id: str, name: str, nric: str, age: int,
    marital_status: MaritalStatus, role: Role, password: str = "password",
) -> User:
    """Build a user with the state components its role requires."""
    return User(
        id=user_id, name=name, nric=nric, age=age,
        marital_status=marital_status, role=role, password=password,
        applicant_state=ApplicantState() if role in APPLICANT_ROLES else None,
        officer_state=OfficerState() if role is Role.OFFICER else None,
    )


@dataclass
class Project:
    id: str
    name: str
    neighborhood: str
    flat_units: dict[FlatType, int]
    flat_prices: dict[FlatType, int]
    open_date: date
    close_date: date
    manager_id: str
    officer_ids: list[str] = field(default_factory=list)
    officer_slots: int = 10
    visible: bool = True

    @property
    def offered_flat_types(self) -> frozenset[FlatType]:
        """Room types with at least one unit left."""
        return frozenset(t for t, units in self.flat_units.items() if units > 0)

    @property
    def has_free_officer_slot(self) -> bool:
        return len(self.officer_ids) < self.officer_slots


@dataclass
class Application:
    id: str
    kind: ApplicationKind
    user_id: str
    project_id: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    sequence: int = 0
    flat_type: FlatType | None = None
    target_id: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is ApplicationStatus.PENDING


@dataclass
class Enquiry:
    id: str
    user_id: str
    project_id: str
    message: str
    reply: str | None = None
    replied_by: str | None = None

    @property
    def is_answered(self) -> bool:
        return self.reply is not None
