"""
Time-of-day utilities for study schedules.

Schedules work with times of day expressed as minutes since midnight
(0..1439). The canonical text form is zero-padded 24-hour ``HH:MM``.
"""

import re
from datetime import time
from typing import Union

from core.constants import MAX_TIME_OF_DAY, MINUTES_PER_HOUR

TimeOfDayInput = Union[str, int, time]

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time_of_day(value: TimeOfDayInput) -> int:
    """
    Parse a time of day into minutes since midnight.

    Accepts "H:MM", "HH:MM", "HH:MM:SS" (seconds must be 00),
    ``datetime.time`` objects with no seconds, or an int minute count.

    Args:
        value: Time of day in any accepted form

    Returns:
        Minutes since midnight in the range 0..1439

    Raises:
        ValueError: If the value cannot be parsed or is out of range
    """
    # bool is an int subclass; True/False are never times
    if isinstance(value, bool):
        raise ValueError(f"unsupported time value: {value!r}")

    if isinstance(value, int):
        minutes = value
    elif isinstance(value, time):
        if value.second or value.microsecond:
            raise ValueError(f"time has sub-minute precision: {value.isoformat()}")
        minutes = value.hour * MINUTES_PER_HOUR + value.minute
    elif isinstance(value, str):
        match = _TIME_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"expected HH:MM, got {value!r}")
        hour, minute = int(match.group(1)), int(match.group(2))
        seconds = match.group(3)
        if hour > 23 or minute > 59:
            raise ValueError(f"hour or minute out of range: {value!r}")
        if seconds is not None and int(seconds) != 0:
            raise ValueError(f"time has sub-minute precision: {value!r}")
        minutes = hour * MINUTES_PER_HOUR + minute
    else:
        raise ValueError(f"unsupported time value: {value!r}")

    if not 0 <= minutes <= MAX_TIME_OF_DAY:
        raise ValueError(f"time of day out of range 0..{MAX_TIME_OF_DAY}: {minutes}")
    return minutes


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hour:02d}:{minute:02d}"


def format_time_12h(minutes: int) -> str:
    """Format minutes since midnight as 12-hour time with AM/PM."""
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    if hour == 0:
        return f"12:{minute:02d} AM"
    elif hour < 12:
        return f"{hour}:{minute:02d} AM"
    elif hour == 12:
        return f"12:{minute:02d} PM"
    else:
        return f"{hour-12}:{minute:02d} PM"


def minutes_to_time(minutes: int) -> time:
    """Convert minutes since midnight to a ``datetime.time``."""
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    return time(hour, minute)


def time_to_minutes(value: time) -> int:
    """Convert a ``datetime.time`` to minutes since midnight, ignoring seconds."""
    return value.hour * MINUTES_PER_HOUR + value.minute
