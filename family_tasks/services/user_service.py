"""
User service.
Registration, login checks, profile updates and the leaderboard.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from family_tasks.models import User
from family_tasks.repositories.user_repository import UserRepository
from family_tasks.auth import hash_password, verify_password
from family_tasks.schemas import UserCreate, UserUpdate
from family_tasks.exceptions import (
    UserNotFoundException, DuplicateUsernameException,
    PermissionDeniedException, DatabaseException
)
from family_tasks.constants import (
    INITIAL_ADMIN_USERNAME, INITIAL_ADMIN_PASSWORD, INITIAL_ADMIN_EMAIL
)

logger = logging.getLogger("family_tasks.users")


class UserService:
    """Service for user accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository()

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(operation, str(e))

    def register(self, user_data: UserCreate, current_user: Optional[User] = None) -> User:
        """
        Create an account.

        The very first account is always an admin and needs no caller.
        After that only an admin may create accounts.
        """
        is_first_user = self.user_repo.count(self.db) == 0
        if not is_first_user and (current_user is None or not current_user.is_admin):
            raise PermissionDeniedException("Only admins can create new users")

        if self.user_repo.get_by_username(self.db, user_data.username):
            raise DuplicateUsernameException(user_data.username)

        user = User(
            username=user_data.username,
            password=hash_password(user_data.password),
            email=user_data.email,
            bio=user_data.bio,
            profile_picture=user_data.profile_picture,
            is_admin=is_first_user or user_data.is_admin,
            points=0,
            streak=0,
        )
        try:
            self.user_repo.create(self.db, user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUsernameException(user_data.username)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("registration", str(e))

        self.db.refresh(user)
        logger.info(f"Registered user {user.username} (id={user.id}, admin={user.is_admin})")
        return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, None otherwise"""
        user = self.user_repo.get_by_username(self.db, username)
        if not user or not verify_password(password, user.password):
            logger.warning(f"Failed login for username {username!r}")
            return None
        return user

    def get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(self.db, user_id)
        if not user:
            raise UserNotFoundException(user_id)
        return user

    def get_users(self) -> List[User]:
        return self.user_repo.get_all(self.db)

    def get_leaderboard(self) -> List[User]:
        return self.user_repo.get_leaderboard(self.db)

    def update_user(self, user_id: int, update: UserUpdate, current_user: User) -> User:
        """
        Update profile fields.

        Users edit themselves; admins edit anyone and may toggle is_admin.
        Accounting fields are never touched here.
        """
        if current_user.id != user_id and not current_user.is_admin:
            raise PermissionDeniedException("You can only edit your own profile")

        user = self.get_user(user_id)
        data = update.model_dump(exclude_unset=True)
        if "is_admin" in data and (not current_user.is_admin or data["is_admin"] is None):
            data.pop("is_admin")

        self.user_repo.update(self.db, user, data)
        self._commit("user update")
        self.db.refresh(user)
        return user

    def reset_password(self, user_id: int, new_password: str) -> None:
        user = self.get_user(user_id)
        self.user_repo.update(self.db, user, {"password": hash_password(new_password)})
        self._commit("password reset")
        logger.info(f"Password reset for user {user_id}")

    def ensure_initial_admin(self) -> Optional[User]:
        """Seed the admin account when no users exist yet"""
        if self.user_repo.count(self.db) > 0:
            return None
        admin = self.user_repo.create(self.db, User(
            username=INITIAL_ADMIN_USERNAME,
            password=hash_password(INITIAL_ADMIN_PASSWORD),
            email=INITIAL_ADMIN_EMAIL,
            is_admin=True,
            points=0,
            streak=0,
        ))
        self._commit("admin seed")
        logger.info(f"Created initial admin account '{INITIAL_ADMIN_USERNAME}'")
        return admin
