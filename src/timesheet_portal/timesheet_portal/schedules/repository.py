from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def get_for_user(self, *, schedule_id: int, user_id: int) -> Optional[Schedule]:
        """Lookup scoped by owner: a schedule of another user is not found."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Schedule]:
        """All schedules joined with their owner's username, newest first."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def ids_for_user(self, user_id: int) -> set[int]:
        raise NotImplementedError

    def create(self, *, user_id: int, project_title: str) -> int:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        """Delete a schedule together with all of its time entries."""

        raise NotImplementedError
