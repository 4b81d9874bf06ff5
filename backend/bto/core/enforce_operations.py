"""Operation Enforcement — validates every precondition before a mutation.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Return rejection dict on violation, None on success
    - validate_* chains its checks: first rejection wins
    - Nothing here mutates the graph; handlers mutate only after validate_* passes

Design Decisions:
    - Pure functions over method dispatch: testable without mocks (ADR: ExMA Functional Core)
    - FSM legality lives in application_fsm; business guards (units, slots,
      ownership) live here so the transition table stays unguarded
"""

from datetime import date

from bto.core.application_fsm import check_transition
from bto.core.domain_types import (
    ApplicationKind, ApplicationStatus, FlatType, MAX_OFFICER_SLOTS, Role,
)
from bto.core.eligibility import clashing_project, eligible_flat_types, is_prohibited
from bto.core.entities import Application, Enquiry, Project, User
from bto.core.housing_graph import HousingGraph
from bto.core.results import rejected


# --- Capabilities -------------------------------------------------------------

def check_applicant_capability(user: User) -> dict | None:
    if user.applicant_state is None:
        return rejected("NOT_AN_APPLICANT", f"{user.role.value}s cannot apply for flats.")
    return None


def check_role(user: User, role: Role) -> dict | None:
    if user.role is not role:
        article = "AN" if role.name[0] in "AEIOU" else "A"
        return rejected(
            f"NOT_{article}_{role.name}", f"Only {role.value}s can perform this operation.",
        )
    return None


def check_project_owner(user: User, project: Project) -> dict | None:
    if user.role is not Role.MANAGER or project.manager_id != user.id:
        return rejected(
            "NOT_PROJECT_MANAGER", f"Only the manager of project {project.id} can do this.",
        )
    return None


def check_project_official(user: User, project: Project) -> dict | None:
    """Manager who owns the project, or officer who joined it."""
    if project.manager_id == user.id:
        return None
    if user.officer_state is not None and project.id in user.officer_state.joined_project_ids:
        return None
    return rejected(
        "NOT_PROJECT_OFFICIAL", f"You are not an official of project {project.id}.",
    )


# --- Apply --------------------------------------------------------------------

def check_can_apply(user: User) -> dict | None:
    if not user.applicant_state.can_apply:
        return rejected(
            "ALREADY_APPLIED", "You already have an active or booked application.",
        )
    return None


def check_project_visible(user: User, project: Project) -> dict | None:
    if not project.visible:
        return rejected("PROJECT_NOT_VISIBLE", f"Project {project.id} is not open for applications.")
    return None


def check_not_prohibited(user: User, project: Project) -> dict | None:
    """Officers cannot apply for a project they registered for or joined."""
    if is_prohibited(user, project):
        return rejected(
            "PROJECT_PROHIBITED", f"You are registered as an officer of project {project.id}.",
        )
    return None


def check_flat_type(user: User, project: Project, flat_type: FlatType | None) -> dict | None:
    eligible = eligible_flat_types(user, project)
    if not eligible:
        return rejected(
            "NO_ELIGIBLE_FLAT_TYPE", f"You are not eligible for any flat type in project {project.id}.",
        )
    if flat_type is not None and flat_type not in eligible:
        return rejected(
            "FLAT_TYPE_NOT_ELIGIBLE", f"{flat_type.value} is not available to you in project {project.id}.",
        )
    return None


def validate_apply(user: User, project: Project, flat_type: FlatType | None) -> dict | None:
    return (
        check_applicant_capability(user)
        or check_can_apply(user)
        or check_project_visible(user, project)
        or check_not_prohibited(user, project)
        or check_flat_type(user, project, flat_type)
    )


# --- Withdrawal ---------------------------------------------------------------

def check_not_withdrawing(user: User) -> dict | None:
    if user.applicant_state.is_withdrawing:
        return rejected("WITHDRAWAL_ALREADY_PENDING", "A withdrawal request is already pending.")
    return None


def check_has_application(user: User) -> dict | None:
    if not user.applicant_state.has_active_application:
        return rejected("NO_ACTIVE_APPLICATION", "You have no application to withdraw.")
    return None


def validate_withdrawal(user: User) -> dict | None:
    return (
        check_applicant_capability(user)
        or check_not_withdrawing(user)
        or check_has_application(user)
    )


# --- Officer registration -----------------------------------------------------

def check_registration_prohibited(officer: User, project: Project) -> dict | None:
    if is_prohibited(officer, project):
        return rejected(
            "PROJECT_PROHIBITED", f"You already joined or registered for project {project.id}.",
        )
    return None


def check_window_clash(graph: HousingGraph, officer: User, project: Project) -> dict | None:
    clash = clashing_project(officer, project, graph.projects)
    if clash is not None:
        return rejected(
            "WINDOW_CLASH",
            f"Application window of {project.id} clashes with joined project {clash.id}.",
        )
    return None


def check_not_applicant_of_project(officer: User, project: Project) -> dict | None:
    if officer.applicant_state.applied_project_id == project.id:
        return rejected(
            "APPLIED_AS_APPLICANT", f"You have applied for project {project.id} as an applicant.",
        )
    return None


def validate_registration(graph: HousingGraph, officer: User, project: Project) -> dict | None:
    return (
        check_role(officer, Role.OFFICER)
        or check_registration_prohibited(officer, project)
        or check_window_clash(graph, officer, project)
        or check_not_applicant_of_project(officer, project)
    )


# --- Status changes -----------------------------------------------------------

def check_units_left(project: Project, application: Application) -> dict | None:
    flat_type = application.flat_type
    if flat_type is None or project.flat_units.get(flat_type, 0) <= 0:
        label = flat_type.value if flat_type else "unspecified"
        return rejected("NO_UNITS_LEFT", f"No {label} units left in project {project.id}.")
    return None


def check_officer_slot(project: Project) -> dict | None:
    if not project.has_free_officer_slot:
        return rejected("OFFICER_SLOTS_FULL", f"Project {project.id} has no free officer slot.")
    return None


def validate_status_change(
    manager: User, project: Project, application: Application, target: ApplicationStatus,
) -> dict | None:
    error = check_project_owner(manager, project) or check_transition(application, target)
    if error:
        return error
    if application.kind is ApplicationKind.REGISTRATION and target is ApplicationStatus.SUCCESSFUL:
        return check_officer_slot(project)
    if application.kind is ApplicationKind.BTO and target is ApplicationStatus.BOOKED:
        return check_units_left(project, application)
    return None


def validate_booking(officer: User, project: Project, application: Application) -> dict | None:
    if application.kind is not ApplicationKind.BTO:
        return rejected("NOT_A_BTO_APPLICATION", f"Application {application.id} is not a flat application.")
    return (
        check_role(officer, Role.OFFICER)
        or check_project_official(officer, project)
        or check_transition(application, ApplicationStatus.BOOKED)
        or check_units_left(project, application)
    )


# --- Project management -------------------------------------------------------

def check_window_valid(open_date: date, close_date: date) -> dict | None:
    if close_date < open_date:
        return rejected("INVALID_WINDOW", "Closing date is before opening date.")
    return None


def check_officer_slots_valid(slots: int, project: Project | None = None) -> dict | None:
    minimum = max(len(project.officer_ids) if project else 0, 1)
    if not minimum <= slots <= MAX_OFFICER_SLOTS:
        return rejected(
            "INVALID_OFFICER_SLOTS",
            f"Officer slots must be between {minimum} and {MAX_OFFICER_SLOTS}.",
        )
    return None


def check_manager_window_free(
    graph: HousingGraph, manager: User, open_date: date, close_date: date,
    exclude_id: str | None = None,
) -> dict | None:
    """A manager handles at most one project per application period."""
    for other in graph.projects_managed_by(manager.id):
        if other.id == exclude_id:
            continue
        if other.open_date <= close_date and open_date <= other.close_date:
            return rejected(
                "MANAGER_WINDOW_CLASH", f"You already manage project {other.id} in this period.",
            )
    return None


def check_no_active_applications(graph: HousingGraph, project: Project) -> dict | None:
    """Deletion is blocked while any live application references the project."""
    for application in graph.applications_for_project(project.id):
        if application.is_pending or (
            application.kind is ApplicationKind.BTO
            and application.status in (ApplicationStatus.SUCCESSFUL, ApplicationStatus.BOOKED)
        ):
            return rejected(
                "PROJECT_HAS_ACTIVE_APPLICATIONS",
                f"Project {project.id} still has active application {application.id}.",
            )
    return None


# --- Enquiries ----------------------------------------------------------------

def check_enquiry_owner(user: User, enquiry: Enquiry) -> dict | None:
    if enquiry.user_id != user.id:
        return rejected("NOT_ENQUIRY_OWNER", "Only the author can change this enquiry.")
    return None


def check_enquiry_open(enquiry: Enquiry) -> dict | None:
    if enquiry.is_answered:
        return rejected("ENQUIRY_ALREADY_ANSWERED", "Answered enquiries cannot be changed.")
    return None


def validate_enquiry_change(user: User, enquiry: Enquiry) -> dict | None:
    return check_enquiry_owner(user, enquiry) or check_enquiry_open(enquiry)
