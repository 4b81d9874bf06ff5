"""Housing Graph — explicit context object owning every RecordStore.

Invariants:
    - One store per entity kind: users (all roles), projects, applications, enquiries
    - stage advances UNLOADED -> HYDRATED -> RESOLVED and never goes back
    - officer ∈ project.officer_ids <=> project ∈ officer.joined_project_ids
      (link_officer is the only writer of either side)
    - Load diagnostics accumulate on the graph; they never abort a load

Design Decisions:
    - Passed by reference to every component: no module-level graph
      (ADR: no ambient/static state)
    - Reverse relations that are not persisted (manager -> projects,
      user -> applications) are derived on demand by scanning the arena
"""

import logging
from dataclasses import dataclass, field

from bto.core.domain_types import ApplicationKind, ID_PREFIXES, LoadStage, RecordKind, Role
from bto.core.entities import Application, Enquiry, Project, User
from bto.core.errors import BtoError, LoadStageError
from bto.core.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadDiagnostic:
    """One per-record load failure (record dropped or field nulled)."""
    record_kind: RecordKind
    record_id: str
    error_code: str
    message: str


@dataclass
class HousingGraph:
    users: RecordStore[str, User] = field(default_factory=lambda: RecordStore("User"))
    projects: RecordStore[str, Project] = field(default_factory=lambda: RecordStore("Project"))
    applications: RecordStore[str, Application] = field(
        default_factory=lambda: RecordStore("Application"),
    )
    enquiries: RecordStore[str, Enquiry] = field(default_factory=lambda: RecordStore("Enquiry"))
    stage: LoadStage = LoadStage.UNLOADED
    diagnostics: list[LoadDiagnostic] = field(default_factory=list)

    # --- Load barrier ------------------------------------------------------------

    def require_stage(self, expected: LoadStage) -> None:
        if self.stage is not expected:
            raise LoadStageError(expected.value, self.stage.value)

    def advance(self, expected: LoadStage, target: LoadStage) -> None:
        self.require_stage(expected)
        self.stage = target

    def record_diagnostic(
        self, record_kind: RecordKind, record_id: str, error: BtoError,
    ) -> None:
        """Store and log a per-record load failure."""
        self.diagnostics.append(LoadDiagnostic(
            record_kind=record_kind, record_id=record_id,
            error_code=error.code, message=error.message,
        ))
        logger.warning(
            f"{record_kind.value} '{record_id}': {error.message}",
            extra={
                "record_kind": record_kind.value,
                "record_id": record_id,
                "error_code": error.code,
            },
        )

    # --- Typed lookups -----------------------------------------------------------

    def user_with_role(self, user_id: str | None, *roles: Role) -> User | None:
        user = self.users.get(user_id)
        if user is None or (roles and user.role not in roles):
            return None
        return user

    def users_with_role(self, role: Role) -> list[User]:
        return [u for u in self.users.all() if u.role is role]

    # --- Derived reverse indexes -------------------------------------------------

    def projects_managed_by(self, manager_id: str) -> list[Project]:
        return [p for p in self.projects.all() if p.manager_id == manager_id]

    def applications_of(
        self, user_id: str, kind: ApplicationKind | None = None,
    ) -> list[Application]:
        return [
            a for a in self.applications.all()
            if a.user_id == user_id and (kind is None or a.kind is kind)
        ]

    def applications_for_project(
        self, project_id: str, kind: ApplicationKind | None = None,
    ) -> list[Application]:
        return [
            a for a in self.applications.all()
            if a.project_id == project_id and (kind is None or a.kind is kind)
        ]

    def enquiries_for_project(self, project_id: str) -> list[Enquiry]:
        return [e for e in self.enquiries.all() if e.project_id == project_id]

    def next_sequence(self) -> int:
        return max((a.sequence for a in self.applications.all()), default=0) + 1

    # --- Runtime creation --------------------------------------------------------

    def add_application(
        self, kind: ApplicationKind, user_id: str, project_id: str, **fields: object,
    ) -> Application:
        """Create and store a PENDING application with the next id and sequence."""
        application = Application(
            id=self.applications.next_id(ID_PREFIXES[RecordKind.APPLICATION]),
            kind=kind, user_id=user_id, project_id=project_id,
            sequence=self.next_sequence(), **fields,
        )
        self.applications.put(application.id, application)
        return application

    # --- Bidirectional relation --------------------------------------------------

    def link_officer(self, officer: User, project: Project) -> None:
        """Add officer<->project membership on both sides. Idempotent."""
        if officer.officer_state is None:
            return
        officer.officer_state.join(project.id)
        if officer.id not in project.officer_ids:
            project.officer_ids.append(officer.id)
