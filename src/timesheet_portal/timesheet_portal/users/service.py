from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..auth.gate import AuthorizationGate
from ..auth.model import Identity
from ..auth.tokens import TokenService
from ..common.validators import require_non_empty
from ..core.constants import INVALID_CREDENTIALS_MESSAGE
from ..core.enums import Role
from ..core.exceptions import DuplicateUsernameError, InvalidCredentialsError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """What the client receives after login."""

    token: str
    identity: Identity


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def login(self, username: Any, password: Any) -> LoginResult:
        if not username or not password or not isinstance(username, str) or not isinstance(password, str):
            raise ValidationError("Username and password required")

        user = self._users.get_by_username(username)
        if not user:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        try:
            ok = check_password_hash(user.password_hash, password)
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        identity = Identity(user_id=user.user_id, username=user.username, role=user.role)
        return LoginResult(token=self._tokens.issue(identity), identity=identity)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository, gate: AuthorizationGate):
        self._users = users
        self._gate = gate

    @staticmethod
    def _parse_role(value: Any) -> Role:
        if value is None or value == "":
            return Role.USER
        try:
            return Role(str(value).upper())
        except ValueError:
            raise ValidationError("Role must be ADMIN or USER")

    def register(self, identity: Identity, *, username: Any, password: Any, role: Optional[Any] = None) -> User:
        self._gate.require_role(identity, Role.ADMIN)

        if not username or not password:
            raise ValidationError("Username and password required")
        username = require_non_empty(username, "Username")
        if not isinstance(password, str):
            raise ValidationError("Password must be a string")
        parsed_role = self._parse_role(role)

        if self._users.get_by_username(username):
            raise DuplicateUsernameError("Username already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=parsed_role,
        )
        logger.info("user %s registered with role %s by %s", username, parsed_role.value, identity.username)

        user = self._users.get_by_id(user_id)
        if user is None:
            return User(user_id=user_id, username=username, password_hash="", role=parsed_role)
        return user

    def list_users(self, identity: Identity) -> Sequence[User]:
        self._gate.require_role(identity, Role.ADMIN)
        return self._users.list_all()
