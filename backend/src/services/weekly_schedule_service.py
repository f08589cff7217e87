"""
Weekly schedule aggregation and slot editing.

Builds a WeeklySchedule from per-day raw slots, computes the total weekly
study time, and applies single-slot edits. Every edit re-validates and
re-normalizes the affected day, so a WeeklySchedule produced here always
satisfies the per-day ordering and non-overlap invariants.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union

from core.constants import MINUTES_PER_WEEK
from core.sentinels import UNKNOWN_DAY
from shared_types.availability import DayKey, DaySchedule, TimeSlot, WeeklySchedule, parse_day_key
from shared_types.errors import DayError, InvalidFormat, NormalizerError
from shared_types.results import Err, Ok, Result
from services.schedule_validation import normalize_day, validate_slot

logger = logging.getLogger(__name__)

RawDays = Union[Mapping[Any, Iterable[Any]], Iterable[Tuple[Any, Iterable[Any]]]]


@dataclass(frozen=True)
class AggregateResult:
    """A validated weekly schedule and its total duration."""
    schedule: WeeklySchedule
    total_minutes: int


class WeeklyScheduleService:
    """
    Service class for weekly schedule operations.

    All methods are pure: they take schedules and raw input and return new
    values, never mutating their arguments.
    """

    @staticmethod
    def _group_raw_days(days: RawDays) -> Result[Dict[DayKey, List[Any]], DayError]:
        """Group raw slots by resolved day, keeping first-seen day order."""
        pairs = days.items() if isinstance(days, Mapping) else days
        grouped: Dict[DayKey, List[Any]] = {}
        for raw_day, raw_slots in pairs:
            try:
                day = parse_day_key(raw_day)
            except ValueError as e:
                # Report against the sentinel bucket since the day itself is unusable
                return Err(DayError(day=UNKNOWN_DAY, error=InvalidFormat(value=raw_day, reason=str(e))))
            grouped.setdefault(day, []).extend(raw_slots)
        return Ok(grouped)

    @staticmethod
    def aggregate(days: RawDays) -> Result[AggregateResult, DayError]:
        """
        Normalize every day and combine them into a WeeklySchedule.

        Days are normalized independently. The first failing day (in input
        order) short-circuits the whole call; nothing is partially applied.
        A day listed more than once has its slots combined before
        normalization.

        Args:
            days: Mapping of day -> raw slots, or a sequence of (day, raw slots)

        Returns:
            Ok(AggregateResult) or Err(DayError) naming the failing day
        """
        grouped_result = WeeklyScheduleService._group_raw_days(days)
        if isinstance(grouped_result, Err):
            return grouped_result

        day_schedules: List[DaySchedule] = []
        for day, raw_slots in grouped_result.value.items():
            normalized = normalize_day(day, raw_slots)
            if isinstance(normalized, Err):
                logger.info(f"Rejected schedule: {day} - {normalized.error.message}")
                return Err(DayError(day=day, error=normalized.error))
            day_schedules.append(normalized.value)

        schedule = WeeklySchedule(tuple(day_schedules))
        total = sum(slot.duration_minutes for _, slot in schedule.iter_slots())
        return Ok(AggregateResult(schedule=schedule, total_minutes=total))

    @staticmethod
    def add_slot(
        schedule: WeeklySchedule,
        day: DayKey,
        raw_slot: Any
    ) -> Result[WeeklySchedule, NormalizerError]:
        """
        Add one slot to a day and re-normalize that day.

        Returns:
            Ok(new schedule) or Err with the slot or overlap error
        """
        validated = validate_slot(raw_slot)
        if isinstance(validated, Err):
            return validated

        existing = schedule.day(day)
        normalized = normalize_day(day, list(existing.slots) + [validated.value])
        if isinstance(normalized, Err):
            return normalized
        return Ok(schedule.with_day(normalized.value))

    @staticmethod
    def remove_slot(schedule: WeeklySchedule, day: DayKey, slot: TimeSlot) -> WeeklySchedule:
        """
        Remove one slot from a day.

        Removing a slot that is not present returns an equal schedule.
        """
        existing = schedule.day(day)
        if slot not in existing.slots:
            return schedule
        remaining = tuple(s for s in existing.slots if s != slot)
        return schedule.with_day(DaySchedule(day=day, slots=remaining))

    @staticmethod
    def replace_day(
        schedule: WeeklySchedule,
        day: DayKey,
        raw_slots: Iterable[Any]
    ) -> Result[WeeklySchedule, NormalizerError]:
        """Replace all slots of one day, leaving other days untouched."""
        normalized = normalize_day(day, raw_slots)
        if isinstance(normalized, Err):
            return normalized
        return Ok(schedule.with_day(normalized.value))

    @staticmethod
    def exceeds_weekly_cap(total_minutes: int, cap_minutes: int = MINUTES_PER_WEEK) -> bool:
        """Check whether a weekly total is above the allowed cap."""
        return total_minutes > cap_minutes


aggregate = WeeklyScheduleService.aggregate
