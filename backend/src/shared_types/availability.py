"""
Shared types for weekly study availability.

This module contains the data classes used across the validation, aggregation
and reconciliation services to ensure type safety and consistency:

- TimeSlot: one contiguous range inside a single day
- DaySchedule: the sorted, non-overlapping slots of one weekday
- WeeklySchedule: the day schedules of one owner
- FlatScheduleRecord: a slot as persisted, without its weekday
"""

import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from core.constants import MAX_TIME_OF_DAY, UNKNOWN_DAY_NAME
from core.sentinels import UNKNOWN_DAY, UnknownDayType
from utils.datetime_utils import format_time_of_day, parse_time_of_day


class DayOfWeek(str, Enum):
    """Canonical weekday identifiers (0=Monday, ..., 6=Sunday)."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        return _DAY_ORDER.index(self)

    @property
    def sort_index(self) -> int:
        return self.weekday

    @property
    def label_en(self) -> str:
        """Get the day name for display."""
        return self.value.capitalize()

    @property
    def label_es(self) -> str:
        """Get the day name in Spanish."""
        return _SPANISH_LABELS[self.weekday]

    @classmethod
    def from_index(cls, index: int) -> "DayOfWeek":
        """Get the day from a Python ``date.weekday()`` style index."""
        return _DAY_ORDER[index]

    @classmethod
    def parse(cls, value: Union[str, int, "DayOfWeek"]) -> "DayOfWeek":
        """
        Parse a weekday from its canonical name, a Spanish label or an index.

        Spanish labels are matched case-insensitively with or without accents
        ("Miércoles", "miercoles").

        Raises:
            ValueError: If the value does not name a weekday
        """
        if isinstance(value, DayOfWeek):
            return value
        if isinstance(value, bool):
            raise ValueError(f"invalid day of week: {value!r}")
        if isinstance(value, int):
            if 0 <= value <= 6:
                return cls.from_index(value)
            raise ValueError(f"day index out of range 0..6: {value}")
        if not isinstance(value, str):
            raise ValueError(f"invalid day of week: {value!r}")
        key = _fold(value)
        day = _DAY_ALIASES.get(key)
        if day is None:
            raise ValueError(f"invalid day of week: {value!r}")
        return day


_DAY_ORDER: List[DayOfWeek] = list(DayOfWeek)
_SPANISH_LABELS = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_DAY_ALIASES: Dict[str, DayOfWeek] = {}
for _day, _label in zip(_DAY_ORDER, _SPANISH_LABELS):
    _DAY_ALIASES[_day.value] = _day
    _DAY_ALIASES[_fold(_label)] = _day


DayKey = Union[DayOfWeek, UnknownDayType]
"""A real weekday, or the UNKNOWN_DAY bucket for slots whose day was lost."""


def day_sort_key(day: DayKey) -> int:
    return day.sort_index


def day_name(day: DayKey) -> str:
    """Serialized name of a day key ("monday", ..., or "general")."""
    return day.value


def parse_day_key(value: Any) -> DayKey:
    """
    Parse a day key: the UNKNOWN_DAY sentinel, its name ("general"), or a weekday.

    Raises:
        ValueError: If the value does not name a weekday
    """
    if isinstance(value, UnknownDayType):
        return value
    if isinstance(value, str) and value.strip().lower() == UNKNOWN_DAY_NAME:
        return UNKNOWN_DAY
    return DayOfWeek.parse(value)


@dataclass(frozen=True, order=True)
class TimeSlot:
    """
    A contiguous time range within one day.

    ``start`` and ``end`` are minutes since midnight with ``start < end``.
    Construct from untrusted input through ``validate_slot`` instead, which
    reports problems as values rather than raising.
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= MAX_TIME_OF_DAY:
            raise ValueError(f"invalid time slot: {self.start}-{self.end}")

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def start_str(self) -> str:
        return format_time_of_day(self.start)

    @property
    def end_str(self) -> str:
        return format_time_of_day(self.end)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Touching slots (one ends where the other starts) do not overlap."""
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> Dict[str, str]:
        """Convert to the {"start", "end"} HH:MM shape."""
        return {"start": self.start_str, "end": self.end_str}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeSlot":
        """
        Create from a {"start", "end"} dictionary of stored data.

        Raises:
            ValueError: If either time is malformed or the range is empty
        """
        return cls(start=parse_time_of_day(data["start"]), end=parse_time_of_day(data["end"]))

    def __str__(self) -> str:
        return f"{self.start_str}-{self.end_str}"


@dataclass(frozen=True)
class DaySchedule:
    """
    The slots of one day, sorted by (start, end) and non-overlapping.

    Produced by ``normalize_day``; the constructor itself does not re-check
    ordering or overlap.
    """
    day: DayKey
    slots: Tuple[TimeSlot, ...] = ()

    @property
    def total_minutes(self) -> int:
        return sum(slot.duration_minutes for slot in self.slots)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    def to_dict(self) -> Dict[str, object]:
        return {
            "day": day_name(self.day),
            "timeSlots": [slot.to_dict() for slot in self.slots],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DaySchedule":
        """
        Create from a {"day", "timeSlots"} dictionary of stored data.

        Slots are sorted but not overlap-checked; use ``normalize_day`` for
        untrusted input.
        """
        slots = sorted(TimeSlot.from_dict(slot) for slot in data.get("timeSlots", []))
        return cls(day=parse_day_key(data["day"]), slots=tuple(slots))


@dataclass(frozen=True)
class WeeklySchedule:
    """
    One owner's weekly availability: at most one DaySchedule per day.

    Days with no slots are not stored; looking one up yields an empty
    DaySchedule. Day schedules are kept in canonical order (Monday first,
    the UNKNOWN_DAY bucket last), so two schedules with the same content
    compare equal regardless of how they were built.
    """
    day_schedules: Tuple[DaySchedule, ...] = ()

    def __post_init__(self) -> None:
        kept = [schedule for schedule in self.day_schedules if not schedule.is_empty]
        seen = set()
        for schedule in kept:
            if schedule.day in seen:
                raise ValueError(f"duplicate day in weekly schedule: {day_name(schedule.day)}")
            seen.add(schedule.day)
        kept.sort(key=lambda schedule: day_sort_key(schedule.day))
        object.__setattr__(self, "day_schedules", tuple(kept))

    @classmethod
    def empty(cls) -> "WeeklySchedule":
        return cls()

    def day(self, day: DayKey) -> DaySchedule:
        for schedule in self.day_schedules:
            if schedule.day == day:
                return schedule
        return DaySchedule(day=day)

    def days(self) -> List[DayKey]:
        """Days that have at least one slot, in canonical order."""
        return [schedule.day for schedule in self.day_schedules]

    def iter_slots(self) -> Iterator[Tuple[DayKey, TimeSlot]]:
        """Yield (day, slot) in day-then-start order."""
        for schedule in self.day_schedules:
            for slot in schedule.slots:
                yield schedule.day, slot

    @property
    def total_minutes(self) -> int:
        return sum(schedule.total_minutes for schedule in self.day_schedules)

    @property
    def slot_count(self) -> int:
        return sum(len(schedule.slots) for schedule in self.day_schedules)

    @property
    def is_empty(self) -> bool:
        return not self.day_schedules

    def with_day(self, day_schedule: DaySchedule) -> "WeeklySchedule":
        """Return a copy with ``day_schedule`` replacing that day's slots."""
        others = [s for s in self.day_schedules if s.day != day_schedule.day]
        return WeeklySchedule(tuple(others) + (day_schedule,))

    def to_dict(self) -> List[Dict[str, object]]:
        """Serialize to the day-keyed blob shape: [{"day", "timeSlots"}, ...]."""
        return [schedule.to_dict() for schedule in self.day_schedules]

    @classmethod
    def from_dict(cls, data: List[Dict[str, Any]]) -> "WeeklySchedule":
        """
        Create from the day-keyed blob shape produced by ``to_dict``.

        Raises:
            ValueError: If a day or slot is malformed, or a day repeats
        """
        return cls(tuple(DaySchedule.from_dict(entry) for entry in data))

    def __contains__(self, day: object) -> bool:
        return any(schedule.day == day for schedule in self.day_schedules)


@dataclass(frozen=True)
class FlatScheduleRecord:
    """
    A slot as stored in the study-block table: no day-of-week association.

    ``duration_minutes`` is always derived from ``start``/``end`` when records
    are produced by ``flatten``.
    """
    start: int
    end: int
    duration_minutes: int
    owner_id: str
    record_id: Optional[str] = field(default=None, compare=False)

    @property
    def start_str(self) -> str:
        return format_time_of_day(self.start)

    @property
    def end_str(self) -> str:
        return format_time_of_day(self.end)

    def to_dict(self) -> Dict[str, Union[str, int, None]]:
        """Convert to dictionary format."""
        return {
            "record_id": self.record_id,
            "start": self.start_str,
            "end": self.end_str,
            "duration_minutes": self.duration_minutes,
            "owner_id": self.owner_id,
        }


__all__ = [
    "DayOfWeek",
    "DayKey",
    "UNKNOWN_DAY",
    "TimeSlot",
    "DaySchedule",
    "WeeklySchedule",
    "FlatScheduleRecord",
    "day_sort_key",
    "day_name",
    "parse_day_key",
]
