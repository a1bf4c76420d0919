from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_JWT_ALGORITHM, DEFAULT_TOKEN_TTL_HOURS
from ..core.enums import Role


@dataclass(frozen=True)
class AuthConfig:
    """Secrets and token policy, built once from the settings module at startup."""

    jwt_secret: str
    external_api_key: str
    jwt_algorithm: str = DEFAULT_JWT_ALGORITHM
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS


@dataclass(frozen=True)
class Identity:
    """Who is calling, as carried inside a bearer token."""

    user_id: int
    username: str
    role: Role

    def to_public(self) -> dict:
        return {"id": self.user_id, "username": self.username, "role": self.role.value}
