"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Entity IDs are case-sensitive strings, unique within their kind
    - NRIC: 9 chars, 'S' or 'T', 7 digits, 1 trailing letter
    - All valid states encoded as Enums: no raw string matching
    - Capabilities (official, applicant) derive from the role tag, never from subclassing

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to CSV/JSON without custom encoders
    - Role capabilities as frozensets: sum-type dispatch on the tag (ADR: no role hierarchy)
"""

import re
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
ProjectId = NewType("ProjectId", str)
ApplicationId = NewType("ApplicationId", str)
EnquiryId = NewType("EnquiryId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Role tag carried by every user record."""
    APPLICANT = "Applicant"
    OFFICER = "Officer"
    MANAGER = "Manager"


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"


class FlatType(str, Enum):
    """Room types offered by a project."""
    TWO_ROOM = "2-Room"
    THREE_ROOM = "3-Room"


class ApplicationKind(str, Enum):
    """Application variants: each has its own legal transition set."""
    BTO = "BTO"
    REGISTRATION = "Registration"
    WITHDRAWAL = "Withdrawal"


class ApplicationStatus(str, Enum):
    """Application lifecycle: PENDING is the only non-terminal state."""
    PENDING = "Pending"
    SUCCESSFUL = "Successful"
    UNSUCCESSFUL = "Unsuccessful"
    BOOKED = "Booked"
    WITHDRAWN = "Withdrawn"


class RecordKind(str, Enum):
    """Flat record kinds, listed in Phase 1 hydration order."""
    APPLICANT = "applicant"
    OFFICER = "officer"
    MANAGER = "manager"
    PROJECT = "project"
    APPLICATION = "application"
    ENQUIRY = "enquiry"


class LoadStage(str, Enum):
    """Two-phase load barrier: UNLOADED -> HYDRATED -> RESOLVED."""
    UNLOADED = "unloaded"
    HYDRATED = "hydrated"
    RESOLVED = "resolved"


# ─── Capabilities ────────────────────────────────────────────────

OFFICIAL_ROLES = frozenset({Role.OFFICER, Role.MANAGER})
APPLICANT_ROLES = frozenset({Role.APPLICANT, Role.OFFICER})

USER_RECORD_KINDS: dict[Role, RecordKind] = {
    Role.APPLICANT: RecordKind.APPLICANT,
    Role.OFFICER: RecordKind.OFFICER,
    Role.MANAGER: RecordKind.MANAGER,
}


# ─── Constants ───────────────────────────────────────────────────

SINGLE_MIN_AGE = 35
MARRIED_MIN_AGE = 21
SINGLE_FLAT_TYPES = frozenset({FlatType.TWO_ROOM})
MAX_OFFICER_SLOTS = 10

ID_PREFIXES: dict[RecordKind, str] = {
    RecordKind.PROJECT: "P",
    RecordKind.APPLICATION: "A",
    RecordKind.ENQUIRY: "E",
}

_NRIC_PATTERN = re.compile(r"[ST]\d{7}[A-Z]")


def is_valid_nric(nric: str) -> bool:
    """NRIC check: S/T prefix, 7 digits, trailing letter. Case-sensitive."""
    return bool(_NRIC_PATTERN.fullmatch(nric))
