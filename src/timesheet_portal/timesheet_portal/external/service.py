from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.validators import require_int
from ..core.exceptions import NotFoundError, ValidationError
from ..schedules.repository import ScheduleRepository
from ..timesheets.model import TimeEntry
from ..timesheets.parsing import normalize_day, parse_note_mode, require_note_text
from ..timesheets.service import TimesheetService
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


class ExternalIntegrationService:
    """Operations for automation callers holding the shared API key.

    There is no caller identity, so no ownership checks; the submitted-entry lock
    still applies.
    """

    def __init__(self, timesheets: TimesheetService, users: UserRepository, schedules: ScheduleRepository):
        self._timesheets = timesheets
        self._users = users
        self._schedules = schedules

    def update_note(self, *, entry_id: Any, day: Any, text: Any, mode: Optional[Any] = None) -> tuple[TimeEntry, str]:
        if not entry_id or not day or text is None:
            raise ValidationError("entryId, day, and text are required")

        day_key = normalize_day(day)
        text = require_note_text(text)
        note_mode = parse_note_mode(mode)

        entry = self._timesheets.resolve_entry(entry_id)
        updated = self._timesheets.apply_day_note(entry, day=day_key, text=text, mode=note_mode)
        logger.info("external note update on entry %s (%s, %s)", updated.entry_id, day_key, note_mode.value)
        return updated, day_key

    def submit_timesheet(
        self,
        *,
        username: Any,
        schedule_id: Any,
        week_ending: Any,
        payload: Mapping[str, Any],
        notes: Any = None,
    ) -> TimeEntry:
        if not username or not schedule_id or not week_ending:
            raise ValidationError("username, scheduleId, and weekEnding are required")

        user = self._users.get_by_username(str(username))
        if not user:
            raise NotFoundError(f"User '{username}' not found")

        schedule = self._schedules.get_for_user(
            schedule_id=require_int(schedule_id, "scheduleId"),
            user_id=user.user_id,
        )
        if not schedule:
            raise NotFoundError("Schedule not found for this user")

        entry = self._timesheets.store_week(
            schedule,
            week_ending=week_ending,
            payload=payload,
            notes=notes,
            submit=True,
        )
        logger.info(
            "external submission for %s: schedule %s week %s",
            user.username,
            schedule.schedule_id,
            entry.week_ending,
        )
        return entry
