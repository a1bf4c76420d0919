from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.constants import DAYS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DayNotes, TimeEntry
from .repository import TimeEntryRepository

_DAY_COLUMNS = ", ".join(DAYS)
_DAY_PLACEHOLDERS = ", ".join(["%s"] * len(DAYS))
_TE_DAY_COLUMNS = ", ".join("te." + d for d in DAYS)
_GUARDED_DAY_UPDATES = ", ".join("{0} = IF(is_submitted, {0}, incoming.{0})".format(d) for d in DAYS)

_SELECT = f"""
    SELECT te.id, te.schedule_id, te.week_ending, {_TE_DAY_COLUMNS},
           te.notes, te.is_submitted, te.created_at,
           sc.user_id AS owner_id, sc.project_title, u.username AS owner_username
    FROM time_entries te
    JOIN schedules sc ON sc.id = te.schedule_id
    JOIN users u ON u.id = sc.user_id
"""

# Columns are assigned left to right, so is_submitted must stay last: every IF() above it
# still sees the stored flag and a submitted row keeps its values.
# The row alias (`AS incoming`) needs MySQL 8.0.19+.
_UPSERT = f"""
    INSERT INTO time_entries (schedule_id, week_ending, {_DAY_COLUMNS}, notes, is_submitted)
    VALUES (%s, %s, {_DAY_PLACEHOLDERS}, %s, %s) AS incoming
    ON DUPLICATE KEY UPDATE
        {_GUARDED_DAY_UPDATES},
        notes = IF(is_submitted, notes, incoming.notes),
        is_submitted = IF(is_submitted, is_submitted, incoming.is_submitted)
"""


def _dump_notes(notes: DayNotes) -> str:
    return json.dumps(notes.to_dict())


def _load_notes(raw: Optional[str]) -> DayNotes:
    if not raw:
        return DayNotes()
    try:
        data = json.loads(raw)
    except ValueError:
        return DayNotes()
    if not isinstance(data, dict):
        return DayNotes()
    return DayNotes.from_mapping(data)


def _row_to_entry(r: Dict[str, Any]) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["id"]),
        schedule_id=int(r["schedule_id"]),
        week_ending=r["week_ending"],
        **{d: float(r.get(d) or 0) for d in DAYS},
        notes=_load_notes(r.get("notes")),
        is_submitted=bool(r.get("is_submitted")),
        created_at=r.get("created_at"),
        owner_id=int(r["owner_id"]) if r.get("owner_id") is not None else None,
        owner_username=r.get("owner_username"),
        project_title=r.get("project_title"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE te.id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def get_for_week(self, *, schedule_id: int, week_ending: date) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE te.schedule_id=%s AND te.week_ending=%s", (int(schedule_id), week_ending))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def upsert(
        self,
        *,
        schedule_id: int,
        week_ending: date,
        hours: Mapping[str, float],
        notes: DayNotes,
        submit: bool = False,
    ) -> TimeEntry:
        params = (
            int(schedule_id),
            week_ending,
            *[float(hours.get(d, 0.0)) for d in DAYS],
            _dump_notes(notes),
            1 if submit else 0,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT, params)

            # If it was an update, lastrowid is not the row id; fetch the row by its key.
            cur.execute(_SELECT + " WHERE te.schedule_id=%s AND te.week_ending=%s", (int(schedule_id), week_ending))
            return _row_to_entry(fetchone(cur))

    def update_hours(self, *, entry_id: int, hours: Mapping[str, float]) -> bool:
        days = [d for d in DAYS if d in hours]
        if not days:
            return False
        assignments = ", ".join(f"{d}=%s" for d in days)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE time_entries SET {assignments} WHERE id=%s AND is_submitted=0",
                (*[float(hours[d]) for d in days], int(entry_id)),
            )
            return cur.rowcount > 0

    def update_notes(self, *, entry_id: int, notes: DayNotes) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_entries SET notes=%s WHERE id=%s AND is_submitted=0",
                (_dump_notes(notes), int(entry_id)),
            )
            return cur.rowcount > 0

    def mark_submitted(self, *, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE time_entries SET is_submitted=1 WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def list_entries(
        self,
        *,
        schedule_ids: Optional[set[int]] = None,
        week_ending: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if schedule_ids is not None:
            if not schedule_ids:
                return []
            ids = sorted(int(i) for i in schedule_ids)
            clauses.append(f"te.schedule_id IN ({', '.join(['%s'] * len(ids))})")
            params.extend(ids)
        if week_ending is not None:
            clauses.append("te.week_ending=%s")
            params.append(week_ending)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY te.created_at DESC, te.id DESC", tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]
