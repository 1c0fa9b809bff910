# courier/services/user_service.py
import uuid

from sqlmodel import Session

from courier.core.errors import UserNotFoundError
from courier.models.user import User
from courier.repositories.user_repo import UserRepository
from courier.schemas.user import UserUpdate, UserRoleUpdate


class UserService:
    """
    Business logic for User profiles and roles.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Currently, only `name` is editable.
        """
        if payload.name is not None:
            current_user.name = payload.name

        return self.repo.update(session, current_user)

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change a user's role (admin only); this is how dispatchers become staff.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise UserNotFoundError()
        user.role = payload.role
        return self.repo.update(session, user)
