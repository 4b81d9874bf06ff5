"""Auth Routes — login, own profile, password change.

Invariants:
    - Login never reveals whether the NRIC or the password was wrong
    - Password changes are persisted like any other mutation
"""

from fastapi import APIRouter, Depends, Request

from bto.api.dependencies import commit, current_user, get_graph
from bto.core.entities import User
from bto.core.errors import AuthenticationError
from bto.core.housing_graph import HousingGraph
from bto.core.results import is_ok
from bto.schemas.requests import LoginRequest, PasswordChange
from bto.schemas.views import ProfileView
from bto.services.handle_auth import change_password, login

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login")
async def login_user(body: LoginRequest, graph: HousingGraph = Depends(get_graph)):
    result = login(graph, body.nric, body.password)
    if not is_ok(result):
        raise AuthenticationError(result["message"].removeprefix("ERROR: "))
    return result


@router.get("/me", response_model=ProfileView)
async def my_profile(user: User = Depends(current_user)):
    return ProfileView.from_entity(user)


@router.post("/password")
async def update_password(
    body: PasswordChange, request: Request, user: User = Depends(current_user),
):
    return commit(request, change_password(user, body.old_password, body.new_password))
