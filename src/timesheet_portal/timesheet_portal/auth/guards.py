from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.enums import Role
from .gate import AuthorizationGate
from .model import Identity


class Guards:
    """View decorators backed by the authorization gate.

    The authenticated identity is stored on ``flask.g.identity``.
    """

    def __init__(self, gate: AuthorizationGate):
        self._gate = gate

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = self._gate.authenticate(request.headers.get("Authorization"))
            return view(*args, **kwargs)

        return wrapper

    def admin_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = self._gate.authenticate(request.headers.get("Authorization"))
            self._gate.require_role(g.identity, Role.ADMIN)
            return view(*args, **kwargs)

        return wrapper

    def api_key_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            self._gate.authenticate_service_key(request.headers.get("X-API-Key"))
            return view(*args, **kwargs)

        return wrapper


def current_identity() -> Identity:
    return g.identity
