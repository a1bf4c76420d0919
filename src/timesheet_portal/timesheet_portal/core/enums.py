from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "ADMIN"
    USER = "USER"


class Day(str, Enum):
    """Day codes of a reporting week, in display order."""

    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"


class NoteMode(str, Enum):
    """How a single-day note update combines with the stored text."""

    REPLACE = "replace"
    APPEND = "append"


class EntryState(str, Enum):
    """Lifecycle of a time entry. SUBMITTED is terminal."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
