"""
Shared datetime helpers.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Optional[Union[str, date]]) -> Optional[datetime]:
    """Parse an ISO 8601 date or timestamp and normalize it to UTC.

    Plain dates (``2023-08-15``) become midnight UTC. Empty values return
    None; malformed ones raise ValueError.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    return ensure_utc(parsed)
