"""
Conversion between weekly schedules and flat study-block records.

The study-block table stores each slot as a flat record with no day of
week. Flattening a WeeklySchedule is therefore lossy: rebuilding from the
records alone puts every slot under the UNKNOWN_DAY bucket. ``reconcile``
decides which source represents the user's schedule when both the store
and the day-preserving fallback cache have data.
"""

import logging
from typing import List, Optional, Sequence

from core.sentinels import UNKNOWN_DAY
from shared_types.availability import DaySchedule, FlatScheduleRecord, TimeSlot, WeeklySchedule

logger = logging.getLogger(__name__)


class ScheduleReconciler:
    """
    Service class for schedule/record conversion and source reconciliation.

    All operations are pure and synchronous.
    """

    @staticmethod
    def flatten_day(day_schedule: DaySchedule, owner_id: str) -> List[FlatScheduleRecord]:
        """Flatten one day's slots into records, in start order."""
        return [
            FlatScheduleRecord(
                start=slot.start,
                end=slot.end,
                duration_minutes=slot.end - slot.start,
                owner_id=owner_id,
            )
            for slot in day_schedule.slots
        ]

    @staticmethod
    def flatten(schedule: WeeklySchedule, owner_id: str) -> List[FlatScheduleRecord]:
        """
        Flatten a weekly schedule into one record per slot.

        Records come out in day-then-start order. ``duration_minutes`` is
        always recomputed from the slot bounds.
        """
        records: List[FlatScheduleRecord] = []
        for day_schedule in schedule.day_schedules:
            records.extend(ScheduleReconciler.flatten_day(day_schedule, owner_id))
        return records

    @staticmethod
    def records_to_slots(records: Sequence[FlatScheduleRecord]) -> List[TimeSlot]:
        """
        Convert records back to slots, sorted by (start, end).

        Stored ``duration_minutes`` is ignored; records with unusable bounds
        are skipped and logged rather than failing the whole read.
        """
        slots: List[TimeSlot] = []
        for record in records:
            try:
                slots.append(TimeSlot(start=record.start, end=record.end))
            except ValueError:
                logger.warning(
                    f"Skipping study block {record.record_id} with invalid range "
                    f"{record.start}-{record.end}"
                )
        slots.sort(key=lambda slot: (slot.start, slot.end))
        return slots

    @staticmethod
    def reconstruct(records: Sequence[FlatScheduleRecord]) -> WeeklySchedule:
        """
        Rebuild a schedule from flat records alone.

        Records carry no weekday, so every slot lands under UNKNOWN_DAY. This
        is a known loss of information, not a bug: the result differs from
        the original schedule whenever that schedule used more than one day.
        Slots from different days may overlap once grouped together; they
        are kept as stored.
        """
        slots = ScheduleReconciler.records_to_slots(records)
        if not slots:
            return WeeklySchedule.empty()
        return WeeklySchedule((DaySchedule(day=UNKNOWN_DAY, slots=tuple(slots)),))

    @staticmethod
    def reconcile(
        authoritative: Optional[Sequence[FlatScheduleRecord]],
        fallback: Optional[WeeklySchedule]
    ) -> WeeklySchedule:
        """
        Choose the schedule that best represents the user's availability.

        Precedence (a strict choice, never a field-by-field merge):
        1. A non-empty fallback wins, since it keeps day-of-week grouping
           the authoritative records lack.
        2. Otherwise non-empty authoritative records give a degraded
           reconstruction under UNKNOWN_DAY.
        3. Otherwise the schedule is empty.
        """
        if fallback is not None and not fallback.is_empty:
            if authoritative:
                logger.debug(
                    f"Using fallback schedule ({fallback.slot_count} slots) over "
                    f"{len(authoritative)} day-less study blocks"
                )
            return fallback
        if authoritative:
            return ScheduleReconciler.reconstruct(authoritative)
        return WeeklySchedule.empty()


flatten = ScheduleReconciler.flatten
flatten_day = ScheduleReconciler.flatten_day
reconstruct = ScheduleReconciler.reconstruct
reconcile = ScheduleReconciler.reconcile
