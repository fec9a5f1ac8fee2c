"""UTC-everywhere time handling.

Documents and accounts store aware UTC datetimes. Calendar-day questions
(an invoice "dated on" the last day of a statement period, a trial "day")
are answered with the helpers below instead of ad hoc date math.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    """
    Current time in UTC.

    Only edges (API handlers, scheduled jobs) call this. Business rules take
    `now` as an argument.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert an aware datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def to_local(dt: datetime, tz_name: str) -> datetime:
    """
    Convert an aware datetime to the business's local timezone.

    Args:
        dt: Aware datetime
        tz_name: IANA timezone name (e.g., "Europe/London")

    Raises:
        ValueError: If datetime is naive or timezone name is invalid
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime. Datetime must be timezone-aware."
        )

    try:
        local_tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")

    return dt.astimezone(local_tz)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse an ISO 8601 string into a UTC datetime.

    Raises ValueError if the string carries no offset.
    """
    dt = datetime.fromisoformat(iso_string)
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot parse naive datetime string. "
            "Include timezone offset (e.g., 'Z' or '+00:00')."
        )
    return to_utc(dt)


def start_of_day(dt: datetime) -> datetime:
    """Midnight at the start of dt's calendar day, in dt's own timezone."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """
    Last representable instant of dt's calendar day, in dt's own timezone.

    Inclusive range upper bounds go through this so that anything dated on
    the final day of a range is still inside it.
    """
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)
