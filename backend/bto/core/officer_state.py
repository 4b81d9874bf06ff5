"""Officer State — membership-state machine for officer project registrations.

Invariants:
    - All ID lists are ordered sets (no duplicates, insertion order kept)
    - prohibited_project_ids ⊇ joined_project_ids ∪ registered_project_ids
    - recompute_prohibited() is called only by the Phase 2 resolver; runtime
      mutations update prohibited_project_ids incrementally

Design Decisions:
    - Lists over sets: the persisted encoding is an ordered ';'-joined list and
      must round-trip losslessly
    - Project side of the joined relation (Project.officer_ids) is updated by
      HousingGraph.link_officer, never from here
"""

from dataclasses import dataclass, field


def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def _discard(items: list[str], value: str) -> None:
    if value in items:
        items.remove(value)


@dataclass
class OfficerState:
    """Per-officer project membership: pure dataclass, no IO."""

    joined_project_ids: list[str] = field(default_factory=list)
    registered_project_ids: list[str] = field(default_factory=list)
    prohibited_project_ids: list[str] = field(default_factory=list)
    project_registration_ids: list[str] = field(default_factory=list)

    def is_prohibited(self, project_id: str) -> bool:
        return project_id in self.prohibited_project_ids

    def recompute_prohibited(self) -> None:
        """Union of joined and registered, joined first. Load-time only."""
        self.prohibited_project_ids = list(
            dict.fromkeys(self.joined_project_ids + self.registered_project_ids),
        )

    # --- Transitions -------------------------------------------------------------

    def add_registration(self, project_id: str, registration_id: str) -> None:
        """Register: pending membership, project becomes prohibited."""
        _append_unique(self.registered_project_ids, project_id)
        _append_unique(self.prohibited_project_ids, project_id)
        _append_unique(self.project_registration_ids, registration_id)

    def approve_registration(self, project_id: str) -> None:
        """Registration SUCCESSFUL: registered -> joined, stays prohibited."""
        _discard(self.registered_project_ids, project_id)
        self.join(project_id)

    def drop_registration(self, project_id: str) -> None:
        """Registration UNSUCCESSFUL/WITHDRAWN: lift the prohibition unless joined."""
        _discard(self.registered_project_ids, project_id)
        if project_id not in self.joined_project_ids:
            _discard(self.prohibited_project_ids, project_id)

    def join(self, project_id: str) -> None:
        _append_unique(self.joined_project_ids, project_id)
        _append_unique(self.prohibited_project_ids, project_id)

    def detach_project(self, project_id: str, registration_ids: list[str]) -> None:
        """Forget a deleted project and its registrations entirely."""
        _discard(self.joined_project_ids, project_id)
        _discard(self.registered_project_ids, project_id)
        _discard(self.prohibited_project_ids, project_id)
        for registration_id in registration_ids:
            _discard(self.project_registration_ids, registration_id)
