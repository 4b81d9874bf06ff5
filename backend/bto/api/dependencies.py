"""API Dependencies — graph access, acting user, and result commit helpers.

Invariants:
    - The graph lives on app.state (set by the lifespan or by tests)
    - The acting user comes from the X-User-Id header; unknown id -> 401
    - A rejected result is raised as its BtoError; the graph is untouched
    - An accepted mutation is written back when autosave is on

Design Decisions:
    - Routes stay thin: lookups, rules and side effects live in services/core
"""

import logging

from fastapi import Depends, Header, Request

from bto.core.entities import User
from bto.core.errors import AuthenticationError, error_from_result
from bto.core.housing_graph import HousingGraph
from bto.core.results import is_ok

logger = logging.getLogger(__name__)


def get_graph(request: Request) -> HousingGraph:
    return request.app.state.graph


def current_user(
    x_user_id: str = Header(..., alias="X-User-Id"),
    graph: HousingGraph = Depends(get_graph),
) -> User:
    user = graph.users.get(x_user_id)
    if user is None:
        raise AuthenticationError(f"Unknown user '{x_user_id}'")
    return user


def raise_for_rejection(result: dict) -> dict:
    """Return an accepted result; raise a rejection as its BtoError."""
    if not is_ok(result):
        raise error_from_result(result)
    return result


def commit(request: Request, result: dict) -> dict:
    """Accept a mutation result and persist the graph when autosave is on."""
    raise_for_rejection(result)
    state = request.app.state
    if getattr(state, "autosave", False):
        state.record_files.save_graph(state.graph)
    return result


def guard(error: dict | None) -> None:
    """Raise a check_* rejection; pass on None."""
    if error:
        raise error_from_result(error)
