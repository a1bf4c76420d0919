from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_iso


@dataclass(frozen=True)
class Schedule:
    """An admin-made assignment of one user to one project."""

    schedule_id: int
    user_id: int
    project_title: str
    is_assigned: bool = True
    created_at: Optional[datetime] = None
    username: Optional[str] = None

    def to_public(self) -> dict:
        return {
            "id": self.schedule_id,
            "userId": self.user_id,
            "projectTitle": self.project_title,
            "isAssigned": self.is_assigned,
            "createdAt": format_iso(self.created_at),
            "user": {"id": self.user_id, "username": self.username},
        }

    def to_named(self) -> dict:
        return {
            "id": self.schedule_id,
            "projectTitle": self.project_title,
            "isAssigned": self.is_assigned,
            "createdAt": format_iso(self.created_at),
        }
