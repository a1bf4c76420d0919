from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Schedule
from .repository import ScheduleRepository

_SELECT = """
    SELECT sc.id, sc.user_id, sc.project_title, sc.is_assigned, sc.created_at, u.username
    FROM schedules sc
    JOIN users u ON u.id = sc.user_id
"""


def _row_to_schedule(r: Dict[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(r["id"]),
        user_id=int(r["user_id"]),
        project_title=r["project_title"],
        is_assigned=bool(r.get("is_assigned", True)),
        created_at=r.get("created_at"),
        username=r.get("username"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sc.id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def get_for_user(self, *, schedule_id: int, user_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sc.id=%s AND sc.user_id=%s", (int(schedule_id), int(user_id)))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def list_all(self) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY sc.created_at DESC, sc.id DESC")
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sc.user_id=%s ORDER BY sc.created_at DESC, sc.id DESC", (int(user_id),))
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def ids_for_user(self, user_id: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM schedules WHERE user_id=%s", (int(user_id),))
            return {int(r["id"]) for r in fetchall(cur)}

    def create(self, *, user_id: int, project_title: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO schedules(user_id, project_title, is_assigned) VALUES(%s,%s,1)",
                (int(user_id), project_title),
            )
            return int(cur.lastrowid)

    def delete(self, *, schedule_id: int) -> bool:
        # Entries first, then the schedule, in one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE schedule_id=%s", (int(schedule_id),))
            cur.execute("DELETE FROM schedules WHERE id=%s", (int(schedule_id),))
            return cur.rowcount > 0
