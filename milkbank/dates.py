"""Calendar helpers for follow-up scheduling.

Next-action and last-contact values are plain calendar dates. "Today" is
always the local calendar day, and callers may pass it explicitly so views
and tests agree on a single reference day.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, str, None]


def local_today() -> date:
    """Return the current local calendar day."""
    return date.today()


def coerce_date(value: DateLike) -> Optional[date]:
    """Turn a date, ISO string or empty value into a date (or None).

    Datetimes are truncated to their calendar day. Unparseable strings raise
    ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    # Accept full timestamps too; only the day matters.
    return date.fromisoformat(text[:10])


def is_overdue(next_action: DateLike, today: Optional[date] = None) -> bool:
    """True when a next action is set and falls strictly before today."""
    action_day = coerce_date(next_action)
    if action_day is None:
        return False
    return action_day < (today or local_today())


def format_short_date(value: DateLike) -> str:
    """Format a date like "Oct 5"; empty input gives an empty string."""
    day = coerce_date(value)
    if day is None:
        return ""
    return f"{day.strftime('%b')} {day.day}"
