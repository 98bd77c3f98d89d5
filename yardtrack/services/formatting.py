"""Small display/normalization helpers shared by services and API responses."""

import re
from datetime import date, datetime, time, timedelta

# Plates are stored upper-case without separators or whitespace.
_PLATE_STRIP = re.compile(r"[\s\-]+")

MAX_PLATE_LENGTH = 16


def normalize_plate(plate: str) -> str:
    """Upper-case a plate and drop spaces and dashes ("abc-1d23" -> "ABC1D23")."""
    return _PLATE_STRIP.sub("", plate or "").upper()[:MAX_PLATE_LENGTH]


def format_mileage(value: int | None) -> str:
    """Format mileage with dot thousands separators, e.g. 12345 -> "12.345 km". None -> "-"."""
    if value is None:
        return "-"
    return f"{value:,}".replace(",", ".") + " km"


def format_duration(delta: timedelta) -> str:
    """
    Format a duration as HH:MM (hours are not wrapped at 24).
    Raises ValueError for negative durations.
    """
    total_minutes = int(delta.total_seconds() // 60)
    if total_minutes < 0:
        raise ValueError("duration must not be negative")
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def duration_between(
    start_date: date,
    start_time: time,
    end_date: date,
    end_time: time,
) -> str:
    """HH:MM elapsed between two date/time pairs."""
    start = datetime.combine(start_date, start_time)
    end = datetime.combine(end_date, end_time)
    return format_duration(end - start)
