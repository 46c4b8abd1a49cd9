from __future__ import annotations

from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.logging_setup import get_logger
from ..common.validators import require_email, require_length, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository


def _password_matches(password_hash: str, password: Any) -> bool:
    if not isinstance(password, str) or not password:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes
        return False


class AccountService:
    """Use case: register, log in and manage one's own account."""

    def __init__(self, users: UserRepository, *, logger: Optional[Any] = None):
        self._users = users
        self._log = logger or get_logger(__name__)

    def register(self, *, name: str, email: str, password: str) -> User:
        name = require_length(name, "Name", 2, 50)
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email already in use")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.USER,
        )
        self._log.info("User registered", user_id=user_id)
        return self._require(user_id)

    def authenticate(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Please provide an email and password")
        if not isinstance(password, str):
            raise ValidationError("Password must be a string")

        user = self._users.get_by_email(require_email(email))
        if not user:
            self._log.warning("Login failed", reason="unknown_email")
            raise AuthenticationError("Invalid credentials")

        if not _password_matches(user.password_hash, password):
            self._log.warning("Login failed", user_id=user.user_id, reason="bad_password")
            raise AuthenticationError("Invalid credentials")

        return user

    def get_profile(self, user_id: int) -> User:
        return self._require(user_id)

    def update_details(self, user_id: int, *, name: Optional[str] = None, email: Optional[str] = None) -> User:
        user = self._require(user_id)
        new_name = require_length(name, "Name", 2, 50) if name is not None else user.name
        new_email = require_email(email) if email is not None else user.email

        if new_email != user.email:
            existing = self._users.get_by_email(new_email)
            if existing and existing.user_id != user.user_id:
                raise ValidationError("Email already in use")

        self._users.update_details(user.user_id, name=new_name, email=new_email)
        return self._require(user.user_id)

    def update_password(self, user_id: int, *, current_password: str, new_password: str) -> User:
        user = self._require(user_id)
        if not _password_matches(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        self._log.info("Password updated", user_id=user.user_id)
        return self._require(user.user_id)

    def _require(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user


class UserAdminService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository, *, logger: Optional[Any] = None):
        self._users = users
        self._log = logger or get_logger(__name__)

    def list_users(self, *, limit: int, offset: int) -> Sequence[User]:
        return self._users.list_page(limit=limit, offset=offset)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_role(self, *, admin_user_id: int, user_id: int, role: str) -> User:
        try:
            new_role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")

        user = self.get_user(user_id)
        self._users.update_role(user.user_id, role=new_role)
        self._log.info(
            "User role changed",
            admin_user_id=admin_user_id,
            user_id=user.user_id,
            old_role=user.role.value,
            new_role=new_role.value,
        )
        return self.get_user(user.user_id)
