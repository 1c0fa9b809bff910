# courier/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from courier.core.auth import require_auth, require_admin
from courier.database import get_session
from courier.models.user import User
from courier.repositories.user_repo import UserRepository
from courier.schemas.user import UserRead, UserUpdate, UserRoleUpdate
from courier.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile, including the role the app
    uses to pick the customer or staff dashboard.
    """
    return current_user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.update_me(session, current_user, payload)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only).

    Allowed roles: customer, staff, admin.
    """
    return service.update_role(session, user_id, payload)
