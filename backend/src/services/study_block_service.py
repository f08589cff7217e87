"""
Study block service for saving and loading a user's weekly study schedule.

This module contains the I/O side of the scheduler: the delete-all-then-
write-all save against the study-block store, and the read path that
reconciles stored records with the day-grouped fallback cache.
"""

import logging
from typing import Any, List, Optional, Union

from shared_types.availability import FlatScheduleRecord, WeeklySchedule, parse_day_key
from shared_types.errors import DayError, InvalidFormat, NormalizerError, PersistenceFailure, PersistencePhase
from shared_types.results import Err, Ok, Result
from services.schedule_cache import ScheduleCache
from services.schedule_reconciler import ScheduleReconciler
from services.study_block_store import StorageError, StudyBlockStore
from services.weekly_schedule_service import (
    AggregateResult,
    RawDays,
    WeeklyScheduleService,
)

logger = logging.getLogger(__name__)


class StudyBlockService:
    """
    Service class for persisting weekly study schedules.

    Callers must not run two ``replace`` calls for the same owner at once;
    the store offers no transaction, so concurrent saves could interleave
    their delete and write phases.
    """

    def __init__(self, store: StudyBlockStore, cache: Optional[ScheduleCache] = None):
        self.store = store
        self.cache = cache

    def load_records(self, owner_id: str) -> Result[List[FlatScheduleRecord], PersistenceFailure]:
        """Fetch all stored study blocks for an owner."""
        try:
            return Ok(self.store.list_records(owner_id))
        except StorageError as e:
            return Err(PersistenceFailure(phase=PersistencePhase.READ, cause=str(e), owner_id=owner_id))

    def load_schedule(self, owner_id: str) -> WeeklySchedule:
        """
        Load the schedule that best represents the owner's availability.

        A store failure on this path is logged and the store is treated as
        empty, so the cached schedule can still be shown.
        """
        records: Optional[List[FlatScheduleRecord]] = None
        loaded = self.load_records(owner_id)
        if isinstance(loaded, Ok):
            records = loaded.value
        else:
            logger.warning(f"Error loading study blocks, falling back to cache: {loaded.error.message}")

        fallback = self.cache.read(owner_id) if self.cache is not None else None
        return ScheduleReconciler.reconcile(records, fallback)

    def _delete_all(self, owner_id: str) -> Optional[PersistenceFailure]:
        try:
            existing = self.store.list_records(owner_id)
        except StorageError as e:
            return PersistenceFailure(phase=PersistencePhase.DELETE, cause=str(e), owner_id=owner_id)

        for record in existing:
            if record.record_id is None:
                return PersistenceFailure(
                    phase=PersistencePhase.DELETE,
                    cause="stored record has no id",
                    owner_id=owner_id,
                )
            try:
                self.store.delete_record(record.record_id)
            except StorageError as e:
                return PersistenceFailure(phase=PersistencePhase.DELETE, cause=str(e), owner_id=owner_id)

        logger.debug(f"Deleted {len(existing)} study blocks for owner {owner_id}")
        return None

    def _write_all(
        self,
        owner_id: str,
        records: List[FlatScheduleRecord]
    ) -> Result[List[FlatScheduleRecord], PersistenceFailure]:
        created: List[FlatScheduleRecord] = []
        for record in records:
            try:
                created.append(self.store.create_record(record))
            except StorageError as e:
                logger.error(
                    f"Wrote {len(created)} of {len(records)} study blocks for owner {owner_id} before failing"
                )
                return Err(PersistenceFailure(phase=PersistencePhase.WRITE, cause=str(e), owner_id=owner_id))
        return Ok(created)

    def replace(
        self,
        owner_id: str,
        schedule: WeeklySchedule
    ) -> Result[List[FlatScheduleRecord], PersistenceFailure]:
        """
        Replace all of an owner's study blocks with ``schedule``.

        Deletes every existing record, then writes one record per slot. If
        the delete phase fails nothing is written. If the write phase fails
        the save is not durable and should be retried as a whole; retrying
        converges to the same records since each attempt starts by deleting
        everything.

        On success the fallback cache, when configured, is refreshed with the
        full day-grouped schedule.

        Returns:
            Ok(created records) or Err(PersistenceFailure)
        """
        delete_failure = self._delete_all(owner_id)
        if delete_failure is not None:
            logger.error(f"Failed to delete existing study blocks: {delete_failure.message}")
            return Err(delete_failure)

        records = ScheduleReconciler.flatten(schedule, owner_id)
        written = self._write_all(owner_id, records)
        if isinstance(written, Err):
            return written

        if self.cache is not None:
            try:
                self.cache.write(owner_id, schedule)
            except StorageError as e:
                # Blocks are saved; a stale cache only affects day grouping on next load
                logger.warning(f"Study blocks saved but cache update failed for owner {owner_id}: {e}")

        logger.info(f"Saved {len(written.value)} study blocks for owner {owner_id}")
        return written

    def save_raw(
        self,
        owner_id: str,
        days: RawDays
    ) -> Result[AggregateResult, Union[DayError, PersistenceFailure]]:
        """
        Validate raw per-day slots and save them.

        Nothing is stored if any day fails validation.
        """
        aggregated = WeeklyScheduleService.aggregate(days)
        if isinstance(aggregated, Err):
            return aggregated

        saved = self.replace(owner_id, aggregated.value.schedule)
        if isinstance(saved, Err):
            return saved
        return aggregated

    def add_slot(
        self,
        owner_id: str,
        day: Any,
        raw_slot: Any
    ) -> Result[WeeklySchedule, Union[NormalizerError, PersistenceFailure]]:
        """
        Add one slot to the owner's current schedule and save the result.

        Unlike ``load_schedule``, a failed store read is not replaced by the
        cache: it returns a READ failure before anything is written.
        """
        try:
            day_key = parse_day_key(day)
        except ValueError as e:
            return Err(InvalidFormat(value=day, reason=str(e)))

        loaded = self.load_records(owner_id)
        if isinstance(loaded, Err):
            logger.error(f"Not adding study slot: {loaded.error.message}")
            return loaded

        fallback = self.cache.read(owner_id) if self.cache is not None else None
        current = ScheduleReconciler.reconcile(loaded.value, fallback)
        updated = WeeklyScheduleService.add_slot(current, day_key, raw_slot)
        if isinstance(updated, Err):
            return updated
        saved = self.replace(owner_id, updated.value)
        if isinstance(saved, Err):
            return saved
        return updated
