from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO timestamps (``2024-06-07T00:00:00Z``) are cut to their date part.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def format_iso(value: Optional[date | datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)
