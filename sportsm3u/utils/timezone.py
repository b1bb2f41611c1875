"""
Date and Time utilities

Parses upstream event timestamps and renders them as playlist display strings
for a fixed hour offset. The offset is applied as a plain shift of the UTC
instant; no timezone database is consulted.
"""
from datetime import datetime, timedelta, timezone
import logging


logger = logging.getLogger(__name__)

EASTERN_STANDARD_OFFSET = -5
EASTERN_DAYLIGHT_OFFSET = -4
# UTC calendar months treated as daylight saving time for the Eastern offset
EASTERN_DST_MONTHS = range(3, 12)

TIMEZONE_ABBREVIATIONS: dict[float, str] = {
    -5: "ET",
    -4: "ET",
    -6: "CT",
    -7: "MT",
    -8: "PT",
    0: "UTC",
    1: "CET",
}


class FormatError(ValueError):
    """Raised when a timestamp cannot be parsed"""
    pass


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'

    Args:
        date_str: ISO8601 datetime string

    Returns:
        Normalized string with explicit timezone offset
    """
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    Naive values (including date-only strings) are taken as UTC.

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        FormatError: If the date string format is invalid
    """
    try:
        normalized = _normalize_iso8601_string(date_str.strip())
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, AttributeError, TypeError, OverflowError) as e:
        raise FormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e


def effective_offset(instant: datetime, offset_hours: float) -> float:
    """
    Resolve the offset actually applied to an instant.

    Only the Eastern standard offset (-5) is adjusted: it becomes -4 for
    UTC months March through November.
    """
    if offset_hours == EASTERN_STANDARD_OFFSET:
        if instant.month in EASTERN_DST_MONTHS:
            return EASTERN_DAYLIGHT_OFFSET
        return EASTERN_STANDARD_OFFSET
    return offset_hours


def _format_offset_number(offset_hours: float) -> str:
    if float(offset_hours).is_integer():
        return str(int(offset_hours))
    return str(offset_hours)


def timezone_abbreviation(offset_hours: float) -> str:
    """Display abbreviation for an offset, e.g. 'ET' or 'UTC+5.5'"""
    abbreviation = TIMEZONE_ABBREVIATIONS.get(offset_hours)
    if abbreviation:
        return abbreviation

    sign = "+" if offset_hours >= 0 else ""
    return f"UTC{sign}{_format_offset_number(offset_hours)}"


def format_event_time(utc_time_str: str | None, offset_hours: float = EASTERN_STANDARD_OFFSET) -> str:
    """
    Convert a UTC timestamp into a playlist display string

    Args:
        utc_time_str: ISO8601 UTC timestamp from the events API
        offset_hours: Display offset in hours (e.g., -5 for ET, -8 for PT)

    Returns:
        String like '1:00 PM ET - 6/15/2025', or an empty string when the
        timestamp cannot be parsed
    """
    try:
        instant = parse_iso8601_to_utc(utc_time_str)
        actual_offset = effective_offset(instant, offset_hours)
        local = instant + timedelta(hours=actual_offset)
    except FormatError:
        logger.debug("Unparseable event time: %r", utc_time_str)
        return ""
    except OverflowError:
        logger.debug("Event time out of range after shift: %r", utc_time_str)
        return ""

    ampm = "PM" if local.hour >= 12 else "AM"
    display_hour = local.hour % 12 or 12

    return (
        f"{display_hour}:{local.minute:02d} {ampm} {timezone_abbreviation(actual_offset)}"
        f" - {local.month}/{local.day}/{local.year}"
    )
