from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import InvalidTokenError
from .model import AuthConfig, Identity


class TokenService:
    """Issues and verifies signed, self-contained access tokens.

    Tokens are not tracked server side; expiry forces a new login.
    """

    def __init__(self, config: AuthConfig):
        self._config = config

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=int(self._config.token_ttl_hours))

    def issue(self, identity: Identity, *, now: Optional[datetime] = None) -> str:
        now = now or now_utc()
        payload = {
            "id": identity.user_id,
            "username": identity.username,
            "role": identity.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._config.jwt_secret, algorithm=self._config.jwt_algorithm)

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self._config.jwt_secret, algorithms=[self._config.jwt_algorithm])
        except JWTError as e:
            raise InvalidTokenError("Invalid or expired token") from e

        try:
            return Identity(
                user_id=int(payload["id"]),
                username=str(payload["username"]),
                role=Role(payload["role"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid or expired token") from e
