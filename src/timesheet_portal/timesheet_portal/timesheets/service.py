from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..auth.gate import AuthorizationGate
from ..auth.model import Identity
from ..common.validators import require_date, require_int
from ..core.enums import NoteMode, Role
from ..core.exceptions import EntryLockedError, NotFoundError, ValidationError
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from .model import DayNotes, TimeEntry
from .parsing import (
    hours_from_payload,
    normalize_day,
    parse_note_mode,
    parse_notes,
    partial_hours_from_payload,
    require_note_text,
)
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)

LOCKED_MESSAGE = "Cannot edit a submitted entry"


class TimesheetService:
    """Weekly time entries: upsert, submit (one-way lock) and note/hour edits.

    Every mutation of an existing entry resolves it, checks owner-or-admin, and
    refuses with EntryLockedError once the entry is submitted. The storage writes
    are themselves guarded on ``is_submitted`` so a concurrent submit wins.
    """

    def __init__(self, entries: TimeEntryRepository, schedules: ScheduleRepository, gate: AuthorizationGate):
        self._entries = entries
        self._schedules = schedules
        self._gate = gate

    # Primitives shared with the external integration (no identity checks here).

    def resolve_entry(self, entry_id: Any) -> TimeEntry:
        entry = self._entries.get_by_id(require_int(entry_id, "entryId"))
        if not entry:
            raise NotFoundError("Time entry not found")
        return entry

    @staticmethod
    def ensure_draft(entry: TimeEntry) -> None:
        if entry.is_submitted:
            raise EntryLockedError(LOCKED_MESSAGE)

    def store_week(
        self,
        schedule: Schedule,
        *,
        week_ending: Any,
        payload: Mapping[str, Any],
        notes: Any,
        submit: bool = False,
    ) -> TimeEntry:
        week = require_date(week_ending, "weekEnding")
        hours = hours_from_payload(payload)
        day_notes = parse_notes(notes)

        existing = self._entries.get_for_week(schedule_id=schedule.schedule_id, week_ending=week)
        if existing:
            self.ensure_draft(existing)

        entry = self._entries.upsert(
            schedule_id=schedule.schedule_id,
            week_ending=week,
            hours=hours,
            notes=day_notes,
            submit=submit,
        )
        # A submitted row is never rewritten. If it does not carry what we sent,
        # another request submitted the week between our read and the write.
        if entry.is_submitted and (not submit or entry.hours() != hours or entry.notes != day_notes):
            raise EntryLockedError(LOCKED_MESSAGE)
        return entry

    def apply_day_note(self, entry: TimeEntry, *, day: str, text: str, mode: NoteMode) -> TimeEntry:
        self.ensure_draft(entry)
        notes = entry.notes.with_day(day, text, mode)
        return self._write_notes(entry, notes)

    def _write_notes(self, entry: TimeEntry, notes: DayNotes) -> TimeEntry:
        if not self._entries.update_notes(entry_id=entry.entry_id, notes=notes):
            raise EntryLockedError(LOCKED_MESSAGE)
        return self.resolve_entry(entry.entry_id)

    # Use cases

    def _authorized_entry(self, identity: Identity, entry_id: Any) -> TimeEntry:
        entry = self.resolve_entry(entry_id)
        self._gate.require_owner_or_admin(identity, int(entry.owner_id or 0))
        return entry

    def save_entry(
        self,
        identity: Identity,
        *,
        schedule_id: Any,
        week_ending: Any,
        payload: Mapping[str, Any],
        notes: Any = None,
    ) -> TimeEntry:
        """Create or update the entry of one schedule/week. ``payload`` carries mon..sun."""
        if not schedule_id or not week_ending:
            raise ValidationError("scheduleId and weekEnding required")

        schedule = self._schedules.get_by_id(require_int(schedule_id, "scheduleId"))
        if not schedule:
            raise NotFoundError("Schedule not found")
        self._gate.require_owner_or_admin(identity, schedule.user_id)

        return self.store_week(schedule, week_ending=week_ending, payload=payload, notes=notes)

    def submit_entry(self, identity: Identity, *, entry_id: Any) -> TimeEntry:
        entry = self._authorized_entry(identity, entry_id)
        self._entries.mark_submitted(entry_id=entry.entry_id)
        logger.info("time entry %s submitted by %s", entry.entry_id, identity.username)
        return self.resolve_entry(entry.entry_id)

    def update_notes(self, identity: Identity, *, entry_id: Any, notes: Any) -> TimeEntry:
        entry = self._authorized_entry(identity, entry_id)
        self.ensure_draft(entry)
        return self._write_notes(entry, parse_notes(notes, required=True))

    def update_hours(self, identity: Identity, *, entry_id: Any, payload: Mapping[str, Any]) -> TimeEntry:
        entry = self._authorized_entry(identity, entry_id)
        self.ensure_draft(entry)

        hours = partial_hours_from_payload(payload)
        if not self._entries.update_hours(entry_id=entry.entry_id, hours=hours):
            raise EntryLockedError(LOCKED_MESSAGE)
        return self.resolve_entry(entry.entry_id)

    def update_day_note(
        self,
        identity: Identity,
        *,
        entry_id: Any,
        day: Any,
        text: Any,
        mode: Optional[Any] = None,
    ) -> TimeEntry:
        day_key = normalize_day(day)
        text = require_note_text(text)
        note_mode = parse_note_mode(mode)

        entry = self._authorized_entry(identity, entry_id)
        return self.apply_day_note(entry, day=day_key, text=text, mode=note_mode)

    def list_entries(
        self,
        identity: Identity,
        *,
        schedule_id: Optional[Any] = None,
        week_ending: Optional[Any] = None,
    ) -> Sequence[TimeEntry]:
        schedule_ids: Optional[set[int]] = None
        if schedule_id not in (None, ""):
            schedule_ids = {require_int(schedule_id, "scheduleId")}

        week = require_date(week_ending, "weekEnding") if week_ending not in (None, "") else None

        if identity.role != Role.ADMIN:
            owned = self._schedules.ids_for_user(identity.user_id)
            schedule_ids = owned if schedule_ids is None else schedule_ids & owned

        return self._entries.list_entries(schedule_ids=schedule_ids, week_ending=week)
