"""Time-of-day and duration formatting helpers."""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Substituted when a stored time has no date portion
PLACEHOLDER_DATE = "2000-01-01"


def format_time_for_db(date: str, time: str) -> Optional[str]:
    """
    Combine a calendar date and a wall-clock time into a stored timestamp.

    The local time is stamped with a UTC marker as-is; no timezone
    conversion takes place.

    Args:
        date: Calendar date (YYYY-MM-DD)
        time: Time of day, "HH:MM" or "HHMM"

    Returns:
        "<date>T<HH:MM>:00.000Z", or None when no time was given
    """
    if not time:
        return None

    formatted_time = time
    if len(time) == 4 and ":" not in time:
        formatted_time = f"{time[:2]}:{time[2:]}"

    return f"{date}T{formatted_time}:00.000Z"


def to_iso_z(value: datetime) -> str:
    """Render a datetime as a UTC ISO string with millisecond precision."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp into a naive UTC datetime.

    Bare times ("09:00") are placed on the placeholder date.

    Raises:
        ValueError: If the value is not an ISO timestamp or time
    """
    text = value.strip()
    if "T" not in text:
        text = f"{PLACEHOLDER_DATE}T{text}"
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def calculate_duration(start_time: Optional[str], end_time: Optional[str]) -> str:
    """
    Format the time between two timestamps as "Xh Ym", "Xh" or "Ym".

    Returns an empty string when either side is missing or malformed, or
    when the end precedes the start.
    """
    if not start_time or not end_time:
        return ""

    try:
        start = parse_timestamp(start_time)
        end = parse_timestamp(end_time)
    except ValueError:
        logger.warning(f"Cannot compute duration for {start_time!r} -> {end_time!r}")
        return ""

    total_seconds = int((end - start).total_seconds())
    if total_seconds < 0:
        return ""

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60

    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    elif hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


def duration_minutes(start_time: Optional[str], end_time: Optional[str]) -> Optional[int]:
    """Whole minutes between two timestamps; None when missing, malformed or negative."""
    if not start_time or not end_time:
        return None
    try:
        seconds = int((parse_timestamp(end_time) - parse_timestamp(start_time)).total_seconds())
    except ValueError:
        return None
    return seconds // 60 if seconds >= 0 else None


def format_clock_time(value: Optional[str]) -> str:
    """Render the time-of-day portion of a timestamp as "h:MM AM|PM"."""
    if not value:
        return ""

    time_part = value.split("T")[1] if "T" in value else value
    parts = time_part.split(":")
    if len(parts) < 2:
        return ""
    try:
        hour = int(parts[0])
    except ValueError:
        return ""

    minutes = parts[1][:2]
    ampm = "PM" if hour >= 12 else "AM"
    formatted_hour = hour % 12 or 12
    return f"{formatted_hour}:{minutes} {ampm}"


def format_elapsed(seconds: int) -> str:
    """Format a running timer as HH:MM:SS."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
