"""Application FSM — legal status transitions per application variant.

Invariants:
    - Initial state PENDING for every variant; PENDING is the only non-terminal state
    - BTO: PENDING -> SUCCESSFUL | UNSUCCESSFUL | BOOKED | WITHDRAWN
    - REGISTRATION: PENDING -> SUCCESSFUL | UNSUCCESSFUL | WITHDRAWN
    - WITHDRAWAL: PENDING -> SUCCESSFUL | UNSUCCESSFUL
    - Any other (variant, from, to) is rejected with the status left unchanged
    - Rejections are returned, never raised

Design Decisions:
    - Transition table as data: the whole FSM is visible in one dict
      (ADR: ExMA no convention-over-config)
"""

from bto.core.domain_types import ApplicationKind, ApplicationStatus
from bto.core.entities import Application
from bto.core.results import ILLEGAL_TRANSITION, rejected

LEGAL_TRANSITIONS: dict[ApplicationKind, frozenset[ApplicationStatus]] = {
    ApplicationKind.BTO: frozenset({
        ApplicationStatus.SUCCESSFUL,
        ApplicationStatus.UNSUCCESSFUL,
        ApplicationStatus.BOOKED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationKind.REGISTRATION: frozenset({
        ApplicationStatus.SUCCESSFUL,
        ApplicationStatus.UNSUCCESSFUL,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationKind.WITHDRAWAL: frozenset({
        ApplicationStatus.SUCCESSFUL,
        ApplicationStatus.UNSUCCESSFUL,
    }),
}


def check_transition(application: Application, target: ApplicationStatus) -> dict | None:
    """Return a rejection dict if the transition is illegal, None otherwise."""
    if not application.is_pending:
        return rejected(
            "APPLICATION_NOT_PENDING",
            f"Application {application.id} is already {application.status.value}; "
            f"only Pending applications change status.",
            ILLEGAL_TRANSITION,
        )
    if target not in LEGAL_TRANSITIONS[application.kind]:
        return rejected(
            "ILLEGAL_TRANSITION",
            f"{application.kind.value} applications cannot move to {target.value}.",
            ILLEGAL_TRANSITION,
        )
    return None


def transition(application: Application, target: ApplicationStatus) -> dict | None:
    """Apply the transition if legal. Returns the rejection, or None on success."""
    error = check_transition(application, target)
    if error:
        return error
    application.status = target
    return None
