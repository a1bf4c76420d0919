from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Mapping, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.timesheet_portal.timesheet_portal.auth.model import AuthConfig, Identity
from src.timesheet_portal.timesheet_portal.container import Container, assemble
from src.timesheet_portal.timesheet_portal.core.enums import Role
from src.timesheet_portal.timesheet_portal.core.exceptions import DuplicateUsernameError
from src.timesheet_portal.timesheet_portal.schedules.model import Schedule
from src.timesheet_portal.timesheet_portal.timesheets.model import DayNotes, TimeEntry
from src.timesheet_portal.timesheet_portal.users.model import User

TEST_API_KEY = "test-external-key"
AUTH_CONFIG = AuthConfig(jwt_secret="test-jwt-secret", external_api_key=TEST_API_KEY)

_EPOCH = datetime(2024, 1, 1, 8, 0, 0)


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[int, User] = {}
        self._next_id = 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        if self.get_by_username(username):
            raise DuplicateUsernameError("Username already exists")
        uid = self._next_id
        self._next_id += 1
        self._by_id[uid] = User(
            user_id=uid,
            username=username,
            password_hash=password_hash,
            role=role,
            created_at=_EPOCH + timedelta(minutes=uid),
        )
        return uid

    def list_all(self):
        return [self._by_id[k] for k in sorted(self._by_id)]

    # test helper
    def add(self, username: str, password: str = "pw", role: Role = Role.USER) -> User:
        uid = self.create_user(username=username, password_hash=generate_password_hash(password), role=role)
        return self._by_id[uid]


class InMemorySchedules:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._rows: dict[int, Schedule] = {}
        self._next_id = 1
        self.entries: Optional["InMemoryEntries"] = None

    def _joined(self, s: Schedule) -> Schedule:
        owner = self._users.get_by_id(s.user_id)
        return replace(s, username=owner.username if owner else None)

    def _newest_first(self, rows):
        return [self._joined(s) for s in sorted(rows, key=lambda s: (s.created_at, s.schedule_id), reverse=True)]

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        s = self._rows.get(int(schedule_id))
        return self._joined(s) if s else None

    def get_for_user(self, *, schedule_id: int, user_id: int) -> Optional[Schedule]:
        s = self.get_by_id(schedule_id)
        if s is None or s.user_id != int(user_id):
            return None
        return s

    def list_all(self):
        return self._newest_first(self._rows.values())

    def list_for_user(self, user_id: int):
        return self._newest_first(s for s in self._rows.values() if s.user_id == int(user_id))

    def ids_for_user(self, user_id: int) -> set[int]:
        return {s.schedule_id for s in self._rows.values() if s.user_id == int(user_id)}

    def create(self, *, user_id: int, project_title: str) -> int:
        sid = self._next_id
        self._next_id += 1
        self._rows[sid] = Schedule(
            schedule_id=sid,
            user_id=int(user_id),
            project_title=project_title,
            is_assigned=True,
            created_at=_EPOCH + timedelta(hours=sid),
        )
        return sid

    def delete(self, *, schedule_id: int) -> bool:
        if int(schedule_id) not in self._rows:
            return False
        if self.entries is not None:
            self.entries.delete_for_schedule(int(schedule_id))
        del self._rows[int(schedule_id)]
        return True

    # test helper
    def add(self, owner: User, project_title: str) -> Schedule:
        return self.get_by_id(self.create(user_id=owner.user_id, project_title=project_title))


class InMemoryEntries:
    """Honors the storage guarantees: unique (schedule, week) and no writes to submitted rows."""

    def __init__(self, schedules: InMemorySchedules):
        self._schedules = schedules
        self._rows: dict[int, TimeEntry] = {}
        self._next_id = 1
        self._write_lock = threading.Lock()
        schedules.entries = self

    def _joined(self, e: TimeEntry) -> TimeEntry:
        s = self._schedules.get_by_id(e.schedule_id)
        if s is None:
            return e
        return replace(e, owner_id=s.user_id, owner_username=s.username, project_title=s.project_title)

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        e = self._rows.get(int(entry_id))
        return self._joined(e) if e else None

    def _find(self, schedule_id: int, week_ending: date) -> Optional[TimeEntry]:
        for e in list(self._rows.values()):
            if e.schedule_id == int(schedule_id) and e.week_ending == week_ending:
                return self._joined(e)
        return None

    def get_for_week(self, *, schedule_id: int, week_ending: date) -> Optional[TimeEntry]:
        return self._find(schedule_id, week_ending)

    def upsert(
        self,
        *,
        schedule_id: int,
        week_ending: date,
        hours: Mapping[str, float],
        notes: DayNotes,
        submit: bool = False,
    ) -> TimeEntry:
        # One atomic statement in MySQL; the lock stands in for it here.
        with self._write_lock:
            return self._upsert(schedule_id, week_ending, hours, notes, submit)

    def _upsert(self, schedule_id, week_ending, hours, notes, submit) -> TimeEntry:
        existing = self._find(schedule_id, week_ending)
        if existing is None:
            eid = self._next_id
            self._next_id += 1
            self._rows[eid] = TimeEntry(
                entry_id=eid,
                schedule_id=int(schedule_id),
                week_ending=week_ending,
                notes=notes,
                is_submitted=bool(submit),
                created_at=_EPOCH + timedelta(days=eid),
                **dict(hours),
            )
            return self.get_by_id(eid)
        if existing.is_submitted:
            return existing
        self._rows[existing.entry_id] = replace(
            self._rows[existing.entry_id], notes=notes, is_submitted=bool(submit), **dict(hours)
        )
        return self.get_by_id(existing.entry_id)

    def update_hours(self, *, entry_id: int, hours: Mapping[str, float]) -> bool:
        e = self._rows.get(int(entry_id))
        if e is None or e.is_submitted:
            return False
        self._rows[e.entry_id] = replace(e, **dict(hours))
        return True

    def update_notes(self, *, entry_id: int, notes: DayNotes) -> bool:
        e = self._rows.get(int(entry_id))
        if e is None or e.is_submitted:
            return False
        self._rows[e.entry_id] = replace(e, notes=notes)
        return True

    def mark_submitted(self, *, entry_id: int) -> bool:
        e = self._rows.get(int(entry_id))
        if e is None:
            return False
        self._rows[e.entry_id] = replace(e, is_submitted=True)
        return True

    def list_entries(self, *, schedule_ids: Optional[set[int]] = None, week_ending: Optional[date] = None):
        rows = list(self._rows.values())
        if schedule_ids is not None:
            rows = [e for e in rows if e.schedule_id in schedule_ids]
        if week_ending is not None:
            rows = [e for e in rows if e.week_ending == week_ending]
        rows.sort(key=lambda e: (e.created_at, e.entry_id), reverse=True)
        return [self._joined(e) for e in rows]

    def delete_for_schedule(self, schedule_id: int) -> None:
        for eid in [k for k, e in self._rows.items() if e.schedule_id == schedule_id]:
            del self._rows[eid]


def identity_of(user: User) -> Identity:
    return Identity(user_id=user.user_id, username=user.username, role=user.role)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 7, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def schedules_repo(users_repo) -> InMemorySchedules:
    return InMemorySchedules(users_repo)


@pytest.fixture
def entries_repo(schedules_repo) -> InMemoryEntries:
    return InMemoryEntries(schedules_repo)


@pytest.fixture
def container(users_repo, schedules_repo, entries_repo) -> Container:
    return assemble(
        auth_config=AUTH_CONFIG,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        entries_repo=entries_repo,
    )


@pytest.fixture
def admin(users_repo) -> User:
    return users_repo.add("admin", "admin123", Role.ADMIN)


@pytest.fixture
def jsmith(users_repo) -> User:
    return users_repo.add("jsmith", "user123")


@pytest.fixture
def mjohnson(users_repo) -> User:
    return users_repo.add("mjohnson", "user123")


@pytest.fixture
def app(container, monkeypatch):
    from src.timesheet_portal.timesheet_portal.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def bearer(container):
    def _bearer(user: User) -> dict:
        return {"Authorization": f"Bearer {container.tokens.issue(identity_of(user))}"}

    return _bearer
