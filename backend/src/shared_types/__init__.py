"""
Shared type definitions for the study scheduler backend.

This module contains dataclasses and types that are used across multiple services.
"""

from shared_types.availability import (
    UNKNOWN_DAY,
    DayKey,
    DayOfWeek,
    DaySchedule,
    FlatScheduleRecord,
    TimeSlot,
    WeeklySchedule,
    parse_day_key,
)
from shared_types.errors import (
    DayError,
    InvalidFormat,
    InvertedRange,
    OverlapDetected,
    PersistenceFailure,
    PersistencePhase,
    ZeroLength,
)
from shared_types.results import Err, Ok, Result

__all__ = [
    "UNKNOWN_DAY",
    "DayKey",
    "DayOfWeek",
    "DaySchedule",
    "FlatScheduleRecord",
    "TimeSlot",
    "WeeklySchedule",
    "parse_day_key",
    "DayError",
    "InvalidFormat",
    "InvertedRange",
    "OverlapDetected",
    "PersistenceFailure",
    "PersistencePhase",
    "ZeroLength",
    "Err",
    "Ok",
    "Result",
]
