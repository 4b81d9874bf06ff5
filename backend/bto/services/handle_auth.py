"""Authentication — NRIC + password login against the user store.

Invariants:
    - Invalid NRIC format is rejected before any lookup
    - A failed login never says which half was wrong

Design Decisions:
    - Passwords compared as stored (the record files hold plain text);
      hmac.compare_digest keeps the comparison constant-time
"""

import hmac

from bto.core.domain_types import is_valid_nric
from bto.core.entities import User
from bto.core.housing_graph import HousingGraph
from bto.core.results import ok, rejected


def login(graph: HousingGraph, nric: str, password: str) -> dict:
    if not is_valid_nric(nric):
        return rejected("INVALID_NRIC", "NRIC must be S/T, 7 digits and a letter.")
    user = next((u for u in graph.users.all() if u.nric == nric), None)
    if user is None or not hmac.compare_digest(user.password.encode(), password.encode()):
        return rejected("AUTHENTICATION_FAILED", "Invalid NRIC or password.")
    return ok(user_id=user.id, role=user.role.value, name=user.name)


def change_password(user: User, old_password: str, new_password: str) -> dict:
    if not hmac.compare_digest(user.password.encode(), old_password.encode()):
        return rejected("AUTHENTICATION_FAILED", "Current password is incorrect.")
    user.password = new_password
    return ok(user_id=user.id)
