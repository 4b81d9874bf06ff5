"""Eligibility Engine — stateless housing rules.

Invariants:
    - All functions are PURE: no IO, no mutation
    - Age thresholds inclusive: Single >= 35 -> {2-Room}; Married >= 21 -> all types;
      anyone else -> no types (and therefore no projects)
    - officer_can_register rejects when the candidate is prohibited, or when ANY
      joined project J fails (J.open < P.open and J.close < P.close)

Design Decisions:
    - The officer window rule is NOT interval intersection: a joined project
      whose window lies entirely AFTER the candidate also blocks registration.
      Only joined projects are compared; registered ones are covered by the
      prohibited set
    - Projects are looked up through a RecordStore so the rules need no graph
"""

from bto.core.domain_types import (
    FlatType, MaritalStatus, MARRIED_MIN_AGE, SINGLE_FLAT_TYPES, SINGLE_MIN_AGE,
)
from bto.core.entities import Project, User
from bto.core.record_store import RecordStore


def visible_room_types(user: User) -> frozenset[FlatType]:
    """Room types a user may apply for, from age and marital status alone."""
    if user.marital_status is MaritalStatus.SINGLE and user.age >= SINGLE_MIN_AGE:
        return SINGLE_FLAT_TYPES
    if user.marital_status is MaritalStatus.MARRIED and user.age >= MARRIED_MIN_AGE:
        return frozenset(FlatType)
    return frozenset()


def eligible_flat_types(user: User, project: Project) -> frozenset[FlatType]:
    """Room types the user may pick in this project (eligible and units left)."""
    return visible_room_types(user) & project.offered_flat_types


def applicant_can_apply(user: User, project: Project) -> bool:
    state = user.applicant_state
    if state is None or not state.can_apply:
        return False
    return bool(eligible_flat_types(user, project))


def windows_clash(existing: Project, candidate: Project) -> bool:
    """True unless `existing` starts AND ends strictly before `candidate`."""
    return not (
        existing.open_date < candidate.open_date
        and existing.close_date < candidate.close_date
    )


def is_prohibited(officer: User, project: Project) -> bool:
    state = officer.officer_state
    return state is not None and state.is_prohibited(project.id)


def clashing_project(
    officer: User, project: Project, projects: RecordStore[str, Project],
) -> Project | None:
    """First joined project whose window blocks registration for `project`."""
    for joined_id in officer.officer_state.joined_project_ids:
        joined = projects.get(joined_id)
        if joined is not None and windows_clash(joined, project):
            return joined
    return None


def officer_can_register(
    officer: User, project: Project, projects: RecordStore[str, Project],
) -> bool:
    if officer.officer_state is None or is_prohibited(officer, project):
        return False
    return clashing_project(officer, project, projects) is None
