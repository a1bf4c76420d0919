from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Dict, Mapping, Optional

from ..common.datetime_utils import format_iso
from ..core.constants import DAYS
from ..core.enums import EntryState, NoteMode


@dataclass(frozen=True)
class DayNotes:
    """Per-day free text notes of one week. Always exactly the seven day keys."""

    mon: str = ""
    tue: str = ""
    wed: str = ""
    thu: str = ""
    fri: str = ""
    sat: str = ""
    sun: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "DayNotes":
        """Build from already-normalized day keys; unknown keys are ignored."""
        return cls(**{d: "" if data.get(d) is None else str(data.get(d)) for d in DAYS})

    def get(self, day: str) -> str:
        return getattr(self, day)

    def with_day(self, day: str, text: str, mode: NoteMode = NoteMode.REPLACE) -> "DayNotes":
        existing = self.get(day)
        if mode == NoteMode.APPEND and existing:
            text = f"{existing}\n{text}"
        return replace(self, **{day: text})

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TimeEntry:
    """One week of daily hours and notes for a single schedule.

    ``owner_id`` is the owning schedule's user; the entry has no owner of its own.
    """

    entry_id: int
    schedule_id: int
    week_ending: date
    mon: float = 0.0
    tue: float = 0.0
    wed: float = 0.0
    thu: float = 0.0
    fri: float = 0.0
    sat: float = 0.0
    sun: float = 0.0
    notes: DayNotes = field(default_factory=DayNotes)
    is_submitted: bool = False
    created_at: Optional[datetime] = None
    owner_id: Optional[int] = None
    owner_username: Optional[str] = None
    project_title: Optional[str] = None

    @property
    def state(self) -> EntryState:
        return EntryState.SUBMITTED if self.is_submitted else EntryState.DRAFT

    def hours(self) -> Dict[str, float]:
        return {d: float(getattr(self, d)) for d in DAYS}

    def to_public(self, *, with_schedule: bool = True) -> dict:
        data: dict = {
            "id": self.entry_id,
            "scheduleId": self.schedule_id,
            "weekEnding": format_iso(self.week_ending),
            **self.hours(),
            "notes": self.notes.to_dict(),
            "isSubmitted": self.is_submitted,
            "createdAt": format_iso(self.created_at),
        }
        if with_schedule:
            data["schedule"] = {
                "id": self.schedule_id,
                "userId": self.owner_id,
                "projectTitle": self.project_title,
                "user": {"id": self.owner_id, "username": self.owner_username},
            }
        return data
