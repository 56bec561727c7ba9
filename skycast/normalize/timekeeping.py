"""Location-local time helpers.

All local times are derived from the UTC offset the provider reports for
the location, never from the machine's own timezone.
"""

from datetime import date, datetime, timedelta, timezone


def location_tz(utc_offset_seconds: int) -> timezone:
    return timezone(timedelta(seconds=utc_offset_seconds))


def location_time(epoch_seconds: int, utc_offset_seconds: int = 0) -> datetime:
    """Aware datetime for ``epoch_seconds`` in the location's fixed offset."""
    return datetime.fromtimestamp(epoch_seconds, tz=location_tz(utc_offset_seconds))


def day_key(dt: datetime) -> date:
    return dt.date()


def format_utc_offset(offset_seconds: int) -> str:
    """Render an offset as ``UTC+05:30`` / ``UTC-03:00``."""
    sign = "+" if offset_seconds >= 0 else "-"
    total = abs(offset_seconds)
    hours, rem = divmod(total, 3600)
    minutes = rem // 60
    return f"UTC{sign}{hours:02d}:{minutes:02d}"


def format_time(dt: datetime) -> str:
    """12-hour clock, e.g. ``3:00 PM``."""
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"


def format_day(dt: datetime | date) -> str:
    """Short day label, e.g. ``Mon, Feb 9``."""
    return f"{dt.strftime('%a, %b')} {dt.day}"


def format_date(dt: datetime) -> str:
    """Long date label, e.g. ``Monday, Feb 9``."""
    return f"{dt.strftime('%A, %b')} {dt.day}"
