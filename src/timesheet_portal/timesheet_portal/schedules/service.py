from __future__ import annotations

import logging
from typing import Any, Sequence

from ..auth.gate import AuthorizationGate
from ..auth.model import Identity
from ..common.validators import require_int, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, users: UserRepository, gate: AuthorizationGate):
        self._schedules = schedules
        self._users = users
        self._gate = gate

    def list_visible(self, identity: Identity) -> Sequence[Schedule]:
        if identity.role == Role.ADMIN:
            return self._schedules.list_all()
        return self._schedules.list_for_user(identity.user_id)

    def create(self, identity: Identity, *, user_id: Any, project_title: Any) -> Schedule:
        self._gate.require_role(identity, Role.ADMIN)

        if not user_id or not project_title:
            raise ValidationError("userId and projectTitle required")
        owner_id = require_int(user_id, "userId")
        title = require_non_empty(project_title, "projectTitle")

        if not self._users.get_by_id(owner_id):
            raise NotFoundError(f"User with id {owner_id} not found")

        schedule_id = self._schedules.create(user_id=owner_id, project_title=title)
        created = self._schedules.get_by_id(schedule_id)
        if created is None:
            raise NotFoundError("Schedule not found")
        return created

    def delete(self, identity: Identity, *, schedule_id: int) -> None:
        self._gate.require_role(identity, Role.ADMIN)

        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise NotFoundError("Schedule not found")
        logger.info("schedule %s deleted by %s", schedule_id, identity.username)

    def list_for_user(self, identity: Identity, *, target_user_id: int) -> tuple[User, Sequence[Schedule]]:
        target_user_id = int(target_user_id)
        if not self._gate.can_act_for(identity, target_user_id):
            raise AuthorizationError("Not authorized to view another user's schedules")

        user = self._users.get_by_id(target_user_id)
        if not user:
            raise NotFoundError(f"User with id {target_user_id} not found")
        return user, self._schedules.list_for_user(target_user_id)
