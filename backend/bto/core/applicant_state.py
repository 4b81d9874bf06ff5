"""Applicant State — session-state machine attached to applicant-capable users.

Invariants:
    - applied_project_id is not None => can_apply is False
    - project_application_id is not None => can_apply is False
    - withdrawal_application_id is not None <=> is_withdrawing is True
    - Every mutation method leaves all three invariants true (by construction,
      never checked post-hoc)

Design Decisions:
    - Dataclass with mutation methods, mirroring the per-session enforcement state:
      pure, deterministic, testable without mocks
    - References held as IDs (arena lookup through HousingGraph), not object pointers
    - Preconditions (can_apply, not withdrawing) checked in enforce_operations,
      so the methods stay total
"""

from dataclasses import dataclass


@dataclass
class ApplicantState:
    """Per-applicant runtime flags and weak (ID) references: pure dataclass, no IO."""

    can_apply: bool = True
    is_withdrawing: bool = False
    is_receipt_ready: bool = False
    applied_project_id: str | None = None
    project_application_id: str | None = None
    withdrawal_application_id: str | None = None

    @property
    def has_active_application(self) -> bool:
        return self.project_application_id is not None

    # --- Transitions -------------------------------------------------------------

    def record_application(self, project_id: str, application_id: str) -> None:
        """Apply: bind project + application, close further applications."""
        self.applied_project_id = project_id
        self.project_application_id = application_id
        self.can_apply = False
        self.is_withdrawing = False

    def record_withdrawal(self, application_id: str) -> None:
        """Submit withdrawal: awaiting manager decision."""
        self.withdrawal_application_id = application_id
        self.is_withdrawing = True

    def complete_withdrawal(self) -> None:
        """Withdrawal SUCCESSFUL: applicant is free to apply again."""
        self.applied_project_id = None
        self.project_application_id = None
        self.withdrawal_application_id = None
        self.can_apply = True
        self.is_withdrawing = False
        self.is_receipt_ready = False

    def reject_withdrawal(self) -> None:
        """Withdrawal UNSUCCESSFUL: the original application stands."""
        self.withdrawal_application_id = None
        self.is_withdrawing = False

    def release_application(self) -> None:
        """BTO application UNSUCCESSFUL/WITHDRAWN by the manager.

        A withdrawal still awaiting a decision on it is dropped as well.
        """
        self.applied_project_id = None
        self.project_application_id = None
        self.withdrawal_application_id = None
        self.can_apply = True
        self.is_withdrawing = False

    def mark_booked(self) -> None:
        """BTO application BOOKED: receipt available. Idempotent."""
        self.can_apply = False
        self.is_receipt_ready = True

    def normalise(self) -> list[str]:
        """Force the invariants after loading persisted flags.

        Returns the names of flags that had to be corrected.
        """
        corrected = []
        if (self.applied_project_id or self.project_application_id) and self.can_apply:
            self.can_apply = False
            corrected.append("can_apply")
        if self.withdrawal_application_id and not self.is_withdrawing:
            self.is_withdrawing = True
            corrected.append("is_withdrawing")
        if self.is_withdrawing and not self.withdrawal_application_id:
            self.is_withdrawing = False
            corrected.append("is_withdrawing")
        return corrected
