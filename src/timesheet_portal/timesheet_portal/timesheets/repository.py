from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import DayNotes, TimeEntry


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_for_week(self, *, schedule_id: int, week_ending: date) -> Optional[TimeEntry]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        schedule_id: int,
        week_ending: date,
        hours: Mapping[str, float],
        notes: DayNotes,
        submit: bool = False,
    ) -> TimeEntry:
        """Insert or update the entry of ``(schedule_id, week_ending)`` in one atomic write.

        A row that is already submitted is left untouched; the stored row is returned
        either way so the caller can tell.
        """

        raise NotImplementedError

    def update_hours(self, *, entry_id: int, hours: Mapping[str, float]) -> bool:
        """Update the given days of a draft entry. False when no draft row matched."""

        raise NotImplementedError

    def update_notes(self, *, entry_id: int, notes: DayNotes) -> bool:
        """Replace the notes of a draft entry. False when no draft row matched."""

        raise NotImplementedError

    def mark_submitted(self, *, entry_id: int) -> bool:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        schedule_ids: Optional[set[int]] = None,
        week_ending: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        """Entries joined with schedule/owner, newest first.

        ``schedule_ids=None`` means no schedule filter; an empty set matches nothing.
        """

        raise NotImplementedError
