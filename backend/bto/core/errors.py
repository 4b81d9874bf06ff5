"""Error Hierarchy — typed, categorized exceptions for all BTO failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Load errors (missing/unresolved reference, bad record) are isolated per record
    - DuplicateKeyError and LoadStageError are the only errors raised out of a load step
    - Business rejections (transition, eligibility) are returned as dicts by the core;
      the API raises them via error_from_result() for the global handler
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with BtoError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_kind: str | None = None
    record_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class BtoError(Exception):
    """Base exception for all BTO portal errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "record_kind": self.context.record_kind,
                    "record_id": self.context.record_id,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── Load Errors (per record, isolated) ─────────────────────────

class MissingRequiredReferenceError(BtoError):
    """Phase 1: a required reference is absent: the record is dropped."""
    def __init__(
        self, field_name: str, target_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Required reference '{field_name}' -> '{target_id}' does not resolve",
            "MISSING_REQUIRED_REFERENCE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 422,
        )
        self.field_name = field_name
        self.target_id = target_id


class UnresolvedOptionalReferenceError(BtoError):
    """Phase 2: an optional reference is absent: the field is nulled."""
    def __init__(
        self, field_name: str, target_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Optional reference '{field_name}' -> '{target_id}' does not resolve",
            "UNRESOLVED_OPTIONAL_REFERENCE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 422,
        )
        self.field_name = field_name
        self.target_id = target_id


class RecordFormatError(BtoError):
    """A primitive field could not be parsed: the record is dropped."""
    def __init__(self, message: str, field_name: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RECORD_FORMAT_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422,
        )
        self.field_name = field_name


class DuplicateKeyError(BtoError):
    """Store insertion with an existing key: fatal to the load step."""
    def __init__(self, store_name: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Duplicate key '{key}' in {store_name} store",
            "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.CRITICAL, context, 409,
        )
        self.store_name = store_name
        self.key = key


class LoadStageError(BtoError):
    """Two-phase barrier violated (e.g. resolve before hydrate)."""
    def __init__(self, expected: str, actual: str, context: ErrorContext | None = None):
        super().__init__(
            f"Load stage must be '{expected}', graph is '{actual}'",
            "LOAD_STAGE_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class IllegalTransitionError(BtoError):
    """FSM rejected a status change: state unchanged."""
    def __init__(self, message: str, code: str = "ILLEGAL_TRANSITION",
                 context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class EligibilityViolationError(BtoError):
    """Business rule rejected an operation: state unchanged."""
    def __init__(self, message: str, code: str = "ELIGIBILITY_VIOLATION",
                 context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 422,
        )


class ResourceNotFoundError(BtoError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class AuthenticationError(BtoError):
    """Login failed or acting user unknown."""
    def __init__(self, message: str = "Invalid NRIC or password",
                 context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Result -> Exception mapping ────────────────────────────────

_RESULT_ERRORS: dict[str, type[BtoError]] = {
    "illegal_transition": IllegalTransitionError,
    "eligibility_violation": EligibilityViolationError,
}


def error_from_result(result: dict) -> BtoError:
    """Turn a rejected result dict into the matching exception.

    Not-found rejections keep their 404 shape; every other category maps
    through _RESULT_ERRORS, falling back to EligibilityViolationError.
    """
    if result.get("category") == "not_found":
        error = ResourceNotFoundError(result.get("resource", "Resource"), result.get("resource_id", ""))
        error.message = result["message"]
        error.code = result["error_code"]
        return error
    error_cls = _RESULT_ERRORS.get(result.get("category", ""), EligibilityViolationError)
    return error_cls(result["message"], result["error_code"])
