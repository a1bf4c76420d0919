from __future__ import annotations

import hmac
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import AuthConfig, Identity
from .tokens import TokenService


class AuthorizationGate:
    """Validates credentials and enforces role/ownership rules.

    Pure validation: nothing here touches storage.
    """

    def __init__(self, config: AuthConfig, tokens: TokenService):
        self._config = config
        self._tokens = tokens

    def authenticate(self, authorization_header: Optional[str]) -> Identity:
        """Resolve an ``Authorization: Bearer <token>`` header to an identity."""
        token = None
        parts = (authorization_header or "").split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]
        if not token:
            raise AuthenticationError("Access token required")
        return self._tokens.verify(token)

    @staticmethod
    def can_act_for(identity: Identity, owner_id: int) -> bool:
        if identity.role == Role.ADMIN:
            return True
        if identity.role == Role.USER:
            return identity.user_id == int(owner_id)
        return False

    def require_role(self, identity: Identity, role: Role) -> None:
        if identity.role != role:
            raise AuthorizationError(f"{role.value.capitalize()} access required")

    def require_owner_or_admin(self, identity: Identity, owner_id: int) -> None:
        if not self.can_act_for(identity, owner_id):
            raise AuthorizationError("Not authorized")

    def authenticate_service_key(self, header_value: Optional[str]) -> None:
        expected = self._config.external_api_key
        if not header_value or not expected:
            raise AuthenticationError("Invalid or missing X-API-Key header")
        if not hmac.compare_digest(header_value.encode("utf-8"), expected.encode("utf-8")):
            raise AuthenticationError("Invalid or missing X-API-Key header")
