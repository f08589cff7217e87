"""
One-time migrations of study slots into the study-block store.

Older accounts keep their study time either as legacy Cognito custom
attributes or only in the onboarding cache. Migrations copy those slots
into the store the first time a user signs in. An owner who already has
study blocks is never migrated again.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from core.sentinels import UNKNOWN_DAY
from shared_types.availability import FlatScheduleRecord, WeeklySchedule
from shared_types.results import Err
from services.legacy_attribute_source import CognitoAttributeSource, extract_legacy_slots
from services.schedule_cache import ScheduleCache
from services.schedule_reconciler import ScheduleReconciler
from services.schedule_validation import normalize_day
from services.study_block_store import StorageError, StudyBlockStore

logger = logging.getLogger(__name__)

SKIP_EXISTING_RECORDS = "existing_records"
SKIP_NO_DATA = "no_data"


@dataclass(frozen=True)
class MigrationResult:
    """Outcome of a migration attempt."""
    success: bool
    migrated: int = 0
    skipped_reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "migrated": self.migrated}
        if self.skipped_reason is not None:
            result["skipped_reason"] = self.skipped_reason
        if self.error is not None:
            result["error"] = self.error
        return result


class StudyBlockMigrationService:
    """
    Service class for migrating legacy study slots into the store.

    Migrations only create records; they never delete, since they run only
    for owners with no records yet.
    """

    def __init__(self, store: StudyBlockStore):
        self.store = store

    def _has_existing_records(self, owner_id: str) -> bool:
        existing = self.store.list_records(owner_id)
        return len(existing) > 0

    def _write_schedule(self, owner_id: str, schedule: WeeklySchedule) -> MigrationResult:
        records: List[FlatScheduleRecord] = ScheduleReconciler.flatten(schedule, owner_id)
        created: List[FlatScheduleRecord] = []
        try:
            for record in records:
                created.append(self.store.create_record(record))
        except StorageError as e:
            logger.exception(
                f"Migration for owner {owner_id} stopped after {len(created)} of {len(records)} blocks: {e}"
            )
            remaining = self._remove_created(owner_id, created)
            return MigrationResult(
                success=False,
                migrated=remaining,
                error=f"Failed to save study blocks to database: {e}",
            )
        return MigrationResult(success=True, migrated=len(created))

    def _remove_created(self, owner_id: str, created: List[FlatScheduleRecord]) -> int:
        """
        Delete the blocks a failed migration already wrote, so the owner is
        not skipped as already migrated on the next attempt.

        Returns the number of blocks that could not be removed.
        """
        remaining = 0
        for record in created:
            if record.record_id is None:
                remaining += 1
                continue
            try:
                self.store.delete_record(record.record_id)
            except StorageError as e:
                logger.error(f"Could not remove partially migrated study block {record.record_id}: {e}")
                remaining += 1
        if remaining:
            logger.error(f"{remaining} partially migrated study blocks left for owner {owner_id}")
        return remaining

    def migrate_from_legacy_attributes(
        self,
        owner_id: str,
        attributes: Mapping[str, str]
    ) -> MigrationResult:
        """
        Migrate the legacy slot attributes of one owner.

        Legacy slots have no weekday and are stored under UNKNOWN_DAY.

        Args:
            owner_id: Owner of the study blocks
            attributes: Cognito attribute name -> value mapping

        Returns:
            MigrationResult; skipped when the owner already has blocks or
            the attributes contain no complete slot pair
        """
        try:
            if self._has_existing_records(owner_id):
                logger.info(f"Owner {owner_id} already has study blocks, skipping migration")
                return MigrationResult(success=True, skipped_reason=SKIP_EXISTING_RECORDS)

            raw_slots = extract_legacy_slots(attributes)
            if not raw_slots:
                logger.info(f"No time slots found in legacy attributes for owner {owner_id}")
                return MigrationResult(success=True, skipped_reason=SKIP_NO_DATA)

            normalized = normalize_day(UNKNOWN_DAY, raw_slots)
            if isinstance(normalized, Err):
                return MigrationResult(success=False, error=normalized.error.message)

            result = self._write_schedule(owner_id, WeeklySchedule((normalized.value,)))
        except StorageError as e:
            logger.exception(f"Error migrating study blocks from legacy attributes: {e}")
            return MigrationResult(success=False, error=str(e))

        if result.success:
            logger.info(f"Successfully migrated {result.migrated} study blocks for owner {owner_id}")
        return result

    def migrate_from_cognito(
        self,
        owner_id: str,
        source: CognitoAttributeSource,
        username: str
    ) -> MigrationResult:
        """Fetch ``username``'s attributes from Cognito and migrate them."""
        try:
            attributes = source.fetch_attributes(username)
        except StorageError as e:
            return MigrationResult(success=False, error=str(e))
        return self.migrate_from_legacy_attributes(owner_id, attributes)

    def migrate_from_cache(self, owner_id: str, cache: ScheduleCache) -> MigrationResult:
        """
        Migrate the day-grouped cached schedule of one owner.

        Returns:
            MigrationResult; skipped when the owner already has blocks or
            the cache holds no slots
        """
        try:
            if self._has_existing_records(owner_id):
                logger.info(f"Owner {owner_id} already has study blocks, skipping migration")
                return MigrationResult(success=True, skipped_reason=SKIP_EXISTING_RECORDS)

            schedule = cache.read(owner_id)
            if schedule is None or schedule.is_empty:
                logger.info(f"No time slots found in schedule cache for owner {owner_id}")
                return MigrationResult(success=True, skipped_reason=SKIP_NO_DATA)

            result = self._write_schedule(owner_id, schedule)
        except StorageError as e:
            logger.exception(f"Error migrating study blocks from cache: {e}")
            return MigrationResult(success=False, error=str(e))

        if result.success:
            logger.info(f"Successfully migrated {result.migrated} study blocks from cache for owner {owner_id}")
        return result
