from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: Any) -> date:
    """Parse YYYY-MM-DD string (or pass through a date) into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def parse_clock(value: str) -> time:
    """Parse HH:MM into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iso(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def inclusive_day_count(start: date, end: date) -> int:
    """Number of calendar days covered by [start, end], never less than 1."""
    return max((end - start).days + 1, 1)
