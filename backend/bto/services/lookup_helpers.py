"""Lookup Helpers — id -> entity resolution shared by every handler.

Invariants:
    - Unknown ids become not_found result dicts, never exceptions
    - Role mismatch reads as "not found" for role-specific lookups

Design Decisions:
    - Tuple return (entity, error): handlers stay flat, one `if error: return error` per lookup
"""

from bto.core.domain_types import Role
from bto.core.entities import Application, Enquiry, Project, User
from bto.core.housing_graph import HousingGraph
from bto.core.results import not_found


def find_user(graph: HousingGraph, user_id: str, *roles: Role) -> tuple[User | None, dict | None]:
    user = graph.user_with_role(user_id, *roles)
    if user is None:
        return None, not_found("User", user_id)
    return user, None


def find_project(graph: HousingGraph, project_id: str) -> tuple[Project | None, dict | None]:
    project = graph.projects.get(project_id)
    if project is None:
        return None, not_found("Project", project_id)
    return project, None


def find_application(
    graph: HousingGraph, application_id: str,
) -> tuple[Application | None, dict | None]:
    application = graph.applications.get(application_id)
    if application is None:
        return None, not_found("Application", application_id)
    return application, None


def find_enquiry(graph: HousingGraph, enquiry_id: str) -> tuple[Enquiry | None, dict | None]:
    enquiry = graph.enquiries.get(enquiry_id)
    if enquiry is None:
        return None, not_found("Enquiry", enquiry_id)
    return enquiry, None
