"""
Date-based views over a weekly study schedule.

Answers calendar questions such as "which study slots apply on this date"
or "when is the next preferred slot" from a WeeklySchedule.
"""

from datetime import date, timedelta
from typing import Dict, List, NamedTuple, Optional

from core.constants import NEXT_SLOT_SEARCH_DAYS
from shared_types.availability import DayOfWeek, TimeSlot, WeeklySchedule, day_name
from utils.datetime_utils import TimeOfDayInput, parse_time_of_day


class NextSlot(NamedTuple):
    date: date
    slot: TimeSlot


def day_of_week_for(target_date: date) -> DayOfWeek:
    """Get the weekday of a date."""
    return DayOfWeek.from_index(target_date.weekday())


def preferred_slots_for_date(schedule: WeeklySchedule, target_date: date) -> List[TimeSlot]:
    """Get the study slots that apply on ``target_date``."""
    return list(schedule.day(day_of_week_for(target_date)).slots)


def is_preferred_time(schedule: WeeklySchedule, target_date: date, at: TimeOfDayInput) -> bool:
    """
    Check whether a time falls inside a preferred slot on that date.

    Slot ends are exclusive: 12:00 is not inside 09:00-12:00.
    """
    minutes = parse_time_of_day(at)
    return any(
        slot.start <= minutes < slot.end
        for slot in preferred_slots_for_date(schedule, target_date)
    )


def is_time_range_preferred(
    schedule: WeeklySchedule,
    target_date: date,
    start: TimeOfDayInput,
    end: TimeOfDayInput
) -> bool:
    """Check whether the whole range [start, end] fits inside one preferred slot."""
    start_minutes = parse_time_of_day(start)
    end_minutes = parse_time_of_day(end)
    return any(
        start_minutes >= slot.start and end_minutes <= slot.end
        for slot in preferred_slots_for_date(schedule, target_date)
    )


def next_available_slot(
    schedule: WeeklySchedule,
    from_date: date,
    max_days: int = NEXT_SLOT_SEARCH_DAYS
) -> Optional[NextSlot]:
    """
    Find the first preferred slot on or after ``from_date``.

    Searches ``max_days`` consecutive days starting at ``from_date`` and
    returns the earliest slot of the first day that has any.
    """
    for offset in range(max_days):
        check_date = from_date + timedelta(days=offset)
        slots = preferred_slots_for_date(schedule, check_date)
        if slots:
            return NextSlot(date=check_date, slot=slots[0])
    return None


def group_slots_by_day(schedule: WeeklySchedule) -> Dict[str, List[TimeSlot]]:
    """Map each day name with slots to its slots."""
    return {day_name(day_schedule.day): list(day_schedule.slots) for day_schedule in schedule.day_schedules}


def format_slot(slot: TimeSlot) -> str:
    """Format a slot for display, e.g. "09:00 - 12:00"."""
    return f"{slot.start_str} - {slot.end_str}"
