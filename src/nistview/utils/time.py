"""UTC timestamps and dates stamped on load reports and export artifacts."""

from datetime import date, datetime, timezone
from typing import Optional

_UTC_OFFSET = "+00:00"


def to_utc_z(dt: datetime) -> str:
    """
    Format an aware datetime as ISO 8601 in UTC, with a trailing 'Z'.

    Raises:
        ValueError: If dt carries no timezone
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Naive datetime not allowed: {dt!r}")
    stamp = dt.astimezone(timezone.utc).isoformat()
    return stamp[: -len(_UTC_OFFSET)] + "Z"


def utc_now_z() -> str:
    return to_utc_z(datetime.now(timezone.utc))


def utc_today(today: Optional[date] = None) -> str:
    """Calendar date (UTC) as YYYY-MM-DD, used in export filenames."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return today.isoformat()
