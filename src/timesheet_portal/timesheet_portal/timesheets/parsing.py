"""Normalization of raw request values into day codes, hours and notes."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Mapping, Optional

from ..core.constants import DAYS
from ..core.enums import NoteMode
from ..core.exceptions import ValidationError
from .model import DayNotes

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def normalize_day(value: Any) -> str:
    """``"Monday"`` -> ``"mon"``. Anything that is not a known day is rejected."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError('"day" is required')
    day = value.strip().lower()[:3]
    if day not in DAYS:
        raise ValidationError(f'Invalid day "{value}". Use: {", ".join(DAYS)}')
    return day


def parse_hours_value(value: Any) -> float:
    """Lenient number parsing: unparseable, missing or non-finite values become 0.

    Strings are read up to the end of their leading number (``"7.5h"`` -> 7.5).
    No range check is applied; negative or >24 values are stored as given.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def hours_from_payload(payload: Mapping[str, Any]) -> Dict[str, float]:
    """All seven days, defaulting to 0."""
    return {d: parse_hours_value(payload.get(d)) for d in DAYS}


def partial_hours_from_payload(payload: Mapping[str, Any]) -> Dict[str, float]:
    """Only the days present in the payload."""
    update = {d: parse_hours_value(payload[d]) for d in DAYS if d in payload}
    if not update:
        raise ValidationError("At least one day field (mon-sun) is required")
    return update


def parse_notes(value: Any, *, required: bool = False) -> DayNotes:
    """Accept a notes object (or its JSON text) keyed by day codes."""
    if value is None or value == "":
        if required:
            raise ValidationError('"notes" is required')
        return DayNotes()

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise ValidationError('"notes" must be a JSON object keyed by day')

    if not isinstance(value, Mapping):
        raise ValidationError('"notes" must be a JSON object keyed by day')

    normalized: Dict[str, Any] = {}
    for key, text in value.items():
        normalized[normalize_day(key)] = text
    return DayNotes.from_mapping(normalized)


def parse_note_mode(value: Optional[Any]) -> NoteMode:
    if value is None or value == "":
        return NoteMode.REPLACE
    try:
        return NoteMode(str(value).lower())
    except ValueError:
        raise ValidationError('"mode" must be "replace" or "append"')


def require_note_text(value: Any) -> str:
    if value is None:
        raise ValidationError('"text" is required')
    if not isinstance(value, str):
        raise ValidationError('"text" must be a string')
    return value
