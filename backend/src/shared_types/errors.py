"""
Error values returned by schedule operations.

Slot-level and day-level errors are always correctable by the caller and
carry enough detail to point at the offending input. Persistence failures
come from the study-block store and say which phase of a save failed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from shared_types.availability import DayKey, TimeSlot, day_name
from utils.datetime_utils import format_time_of_day


@dataclass(frozen=True)
class InvalidFormat:
    """A slot or one of its times could not be parsed."""
    value: Any
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid time slot {self.value!r}: {self.reason}"


@dataclass(frozen=True)
class InvertedRange:
    """A slot ends before it starts."""
    start: int
    end: int

    @property
    def message(self) -> str:
        return (
            f"Invalid time range {format_time_of_day(self.start)}-{format_time_of_day(self.end)}: "
            "end is before start"
        )


@dataclass(frozen=True)
class ZeroLength:
    """A slot starts and ends at the same minute."""
    at: int

    @property
    def message(self) -> str:
        return f"Empty time range at {format_time_of_day(self.at)}"


@dataclass(frozen=True)
class OverlapDetected:
    """Two slots on the same day overlap. ``slot_a`` starts first."""
    slot_a: TimeSlot
    slot_b: TimeSlot

    @property
    def message(self) -> str:
        return f"Overlapping time slots: {self.slot_a} and {self.slot_b}"


SlotError = Union[InvalidFormat, InvertedRange, ZeroLength]
NormalizerError = Union[InvalidFormat, InvertedRange, ZeroLength, OverlapDetected]


@dataclass(frozen=True)
class DayError:
    """A normalizer error tagged with the day it occurred on."""
    day: DayKey
    error: NormalizerError

    @property
    def message(self) -> str:
        return f"{day_name(self.day)}: {self.error.message}"


class PersistencePhase(str, Enum):
    READ = "read"
    DELETE = "delete"
    WRITE = "write"


@dataclass(frozen=True)
class PersistenceFailure:
    """
    The study-block store failed during ``phase``.

    A DELETE failure means nothing was written. A WRITE failure means the
    owner's old records are gone and only some new ones may exist; the save
    is not durable and should be retried as a whole.
    """
    phase: PersistencePhase
    cause: str
    owner_id: str = ""

    @property
    def message(self) -> str:
        return f"Failed to {self.phase.value} study blocks for {self.owner_id or 'owner'}: {self.cause}"
