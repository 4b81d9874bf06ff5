"""Operation Results — discriminated result dicts returned by every mutating operation.

Invariants:
    - Success: {"status": "ok", ...payload}
    - Rejection: {"status": "error", "error_code", "category", "message"}
    - category is one of "illegal_transition", "eligibility_violation", "not_found"

Design Decisions:
    - Return dicts (not exceptions): callers explain rejections to users from
      error_code, and the error path has the same shape as the success path
      (ADR: uniform result shape)
"""

ILLEGAL_TRANSITION = "illegal_transition"
ELIGIBILITY_VIOLATION = "eligibility_violation"
NOT_FOUND = "not_found"


def ok(**payload: object) -> dict:
    """Construct a success result."""
    return {"status": "ok", **payload}


def rejected(code: str, message: str, category: str = ELIGIBILITY_VIOLATION) -> dict:
    """Construct a standard rejection dict."""
    return {
        "status": "error",
        "error_code": code,
        "category": category,
        "message": f"ERROR: {message}",
    }


def not_found(resource: str, resource_id: str) -> dict:
    """Rejection for an unknown id passed by a caller."""
    result = rejected(
        f"{resource.upper()}_NOT_FOUND", f"{resource} '{resource_id}' not found.", NOT_FOUND,
    )
    result["resource"] = resource
    result["resource_id"] = resource_id
    return result


def is_ok(result: dict) -> bool:
    return result.get("status") == "ok"
