from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_ACCESS_MINUTES, DEFAULT_REFRESH_DAYS, JWT_ALGORITHM
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import User

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role
    token_type: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_ttl: timedelta
    refresh_ttl: timedelta


class TokenService:
    """Signs and verifies access/refresh JWTs.

    Nothing is stored server side: a token is valid until it expires, as long
    as its signature checks out against the secret of its kind.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=DEFAULT_ACCESS_MINUTES),
        refresh_ttl: timedelta = timedelta(days=DEFAULT_REFRESH_DAYS),
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("JWT secrets must be configured")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens need distinct secrets")
        self._secrets = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._ttls = {ACCESS: access_ttl, REFRESH: refresh_ttl}

    @property
    def access_ttl(self) -> timedelta:
        return self._ttls[ACCESS]

    @property
    def refresh_ttl(self) -> timedelta:
        return self._ttls[REFRESH]

    def issue_access(self, user: User, *, now: Optional[datetime] = None) -> str:
        return self._issue(user, ACCESS, now=now)

    def issue_refresh(self, user: User, *, now: Optional[datetime] = None) -> str:
        return self._issue(user, REFRESH, now=now)

    def issue_pair(self, user: User, *, now: Optional[datetime] = None) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access(user, now=now),
            refresh_token=self.issue_refresh(user, now=now),
            access_ttl=self.access_ttl,
            refresh_ttl=self.refresh_ttl,
        )

    def decode_access(self, token: str) -> TokenClaims:
        return self._decode(token, ACCESS)

    def decode_refresh(self, token: str) -> TokenClaims:
        return self._decode(token, REFRESH)

    def _issue(self, user: User, token_type: str, *, now: Optional[datetime]) -> str:
        issued_at = now or now_utc()
        expires_at = issued_at + self._ttls[token_type]
        claims = {
            "id": user.user_id,
            "role": user.role.value,
            "type": token_type,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self._secrets[token_type], algorithm=JWT_ALGORITHM)

    def _decode(self, token: str, token_type: str) -> TokenClaims:
        if not token:
            raise AuthenticationError("Not authorized to access this route")
        try:
            payload = jwt.decode(token, self._secrets[token_type], algorithms=[JWT_ALGORITHM])
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTError:
            raise AuthenticationError("Not authorized to access this route")

        if payload.get("type") != token_type:
            raise AuthenticationError("Not authorized to access this route")
        try:
            return TokenClaims(
                user_id=int(payload["id"]),
                role=Role(payload["role"]),
                token_type=token_type,
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Not authorized to access this route")
