"""Visibility Filter — role-scoped views over the housing graph.

Invariants:
    - Applicant: visible projects with an eligible flat type left, plus the
      applied project even if hidden; own applications; own enquiries
    - Officer: visible projects outside prohibited_project_ids, plus the applied
      project; own applications/registrations plus every application to a joined
      project; own enquiries plus enquiries on joined projects
    - Manager: every project; applications to owned projects; every enquiry
    - Results keep store insertion order and never repeat an entity

Design Decisions:
    - Dispatch on the role tag through explicit dicts (ADR: no role hierarchy)
    - Joined projects are exposed separately (handled_projects_for) because they
      are prohibited for the officer's own applications
"""

from collections.abc import Callable

from bto.core.domain_types import Role
from bto.core.eligibility import eligible_flat_types, is_prohibited
from bto.core.entities import Application, Enquiry, Project, User
from bto.core.housing_graph import HousingGraph


def projects_for(graph: HousingGraph, user: User) -> list[Project]:
    return _PROJECT_VIEWS[user.role](graph, user)


def applications_for(graph: HousingGraph, user: User) -> list[Application]:
    return _APPLICATION_VIEWS[user.role](graph, user)


def enquiries_for(graph: HousingGraph, user: User) -> list[Enquiry]:
    return _ENQUIRY_VIEWS[user.role](graph, user)


def handled_projects_for(graph: HousingGraph, user: User) -> list[Project]:
    """Projects an official is responsible for."""
    if user.role is Role.MANAGER:
        return graph.projects_managed_by(user.id)
    if user.officer_state is None:
        return []
    return [
        p for p in graph.projects.all() if p.id in user.officer_state.joined_project_ids
    ]


# --- Projects -----------------------------------------------------------------

def _applied_project_id(user: User) -> str | None:
    return user.applicant_state.applied_project_id if user.applicant_state else None


def _applicant_projects(graph: HousingGraph, user: User) -> list[Project]:
    applied = _applied_project_id(user)
    return [
        p for p in graph.projects.all()
        if p.id == applied or (p.visible and eligible_flat_types(user, p))
    ]


def _officer_projects(graph: HousingGraph, user: User) -> list[Project]:
    applied = _applied_project_id(user)
    return [
        p for p in graph.projects.all()
        if p.id == applied or (p.visible and not is_prohibited(user, p))
    ]


def _manager_projects(graph: HousingGraph, user: User) -> list[Project]:
    return list(graph.projects.all())


# --- Applications -------------------------------------------------------------

def _own_applications(graph: HousingGraph, user: User) -> list[Application]:
    return graph.applications_of(user.id)


def _officer_applications(graph: HousingGraph, user: User) -> list[Application]:
    joined = set(user.officer_state.joined_project_ids)
    return [
        a for a in graph.applications.all()
        if a.user_id == user.id or a.project_id in joined
    ]


def _manager_applications(graph: HousingGraph, user: User) -> list[Application]:
    owned = {p.id for p in graph.projects_managed_by(user.id)}
    return [a for a in graph.applications.all() if a.project_id in owned]


# --- Enquiries ----------------------------------------------------------------

def _own_enquiries(graph: HousingGraph, user: User) -> list[Enquiry]:
    return [e for e in graph.enquiries.all() if e.user_id == user.id]


def _officer_enquiries(graph: HousingGraph, user: User) -> list[Enquiry]:
    joined = set(user.officer_state.joined_project_ids)
    return [
        e for e in graph.enquiries.all()
        if e.user_id == user.id or e.project_id in joined
    ]


def _manager_enquiries(graph: HousingGraph, user: User) -> list[Enquiry]:
    return list(graph.enquiries.all())


_PROJECT_VIEWS: dict[Role, Callable[[HousingGraph, User], list[Project]]] = {
    Role.APPLICANT: _applicant_projects,
    Role.OFFICER: _officer_projects,
    Role.MANAGER: _manager_projects,
}
_APPLICATION_VIEWS: dict[Role, Callable[[HousingGraph, User], list[Application]]] = {
    Role.APPLICANT: _own_applications,
    Role.OFFICER: _officer_applications,
    Role.MANAGER: _manager_applications,
}
_ENQUIRY_VIEWS: dict[Role, Callable[[HousingGraph, User], list[Enquiry]]] = {
    Role.APPLICANT: _own_enquiries,
    Role.OFFICER: _officer_enquiries,
    Role.MANAGER: _manager_enquiries,
}
