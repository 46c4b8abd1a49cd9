from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..common.logging_setup import get_logger
from ..core.constants import ACCESS_COOKIE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from ..users.model import User
from ..users.repository import UserRepository
from .tokens import TokenService


@dataclass(frozen=True)
class RefreshResult:
    user: User
    access_token: str


def extract_token(headers: Mapping[str, str], cookies: Mapping[str, str]) -> Optional[str]:
    """Bearer header first, then the access cookie."""
    auth_header = headers.get("Authorization") or ""
    if auth_header.startswith("Bearer"):
        parts = auth_header.split(" ", 1)
        token = parts[1].strip() if len(parts) == 2 else ""
        return token or None
    return cookies.get(ACCESS_COOKIE) or None


class AuthGuard:
    """Resolves who is calling, and separately whether they may proceed."""

    def __init__(self, users: UserRepository, tokens: TokenService, *, logger: Optional[Any] = None):
        self._users = users
        self._tokens = tokens
        self._log = logger or get_logger(__name__)

    def authenticate(self, token: Optional[str]) -> User:
        claims = self._tokens.decode_access(token or "")

        # Re-read the user: the account may be gone, and the role in the
        # token may be stale.
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def authorize(self, user: Optional[User], allowed_roles: Iterable[Role]) -> User:
        if user is None:
            raise AuthenticationError("Not authenticated")
        allowed = {Role(r) for r in allowed_roles}
        if user.role not in allowed:
            self._log.warning(
                "Access denied",
                user_id=user.user_id,
                role=user.role.value,
                required=sorted(r.value for r in allowed),
            )
            raise AuthorizationError("Not authorized to perform this action")
        return user

    def refresh(self, refresh_token: Optional[str]) -> RefreshResult:
        if not refresh_token:
            raise AuthenticationError("Refresh token not found")
        try:
            claims = self._tokens.decode_refresh(refresh_token)
        except AuthenticationError:
            raise AuthenticationError("Invalid refresh token")

        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise NotFoundError("User not found")
        return RefreshResult(user=user, access_token=self._tokens.issue_access(user))
