"""
End-to-end tests for saving and loading weekly study schedules.

Exercises StudyBlockService and StudyBlockMigrationService against the
SQLite store and the JSON file cache together.
"""

from core.sentinels import UNKNOWN_DAY
from shared_types.availability import DayOfWeek
from shared_types.results import Ok
from services.study_block_migration_service import SKIP_EXISTING_RECORDS, StudyBlockMigrationService
from services.study_block_service import StudyBlockService
from services.weekly_schedule_service import aggregate

OWNER = "us-east-1:5f1c2b7e"


class TestSchedulePersistenceFlow:
    """Save, reload and edit a schedule through the full stack."""

    def test_save_and_reload(self, sql_store, file_cache):
        service = StudyBlockService(sql_store, file_cache)

        saved = service.save_raw(OWNER, [
            ("Lunes", [{"start": "09:00", "end": "12:00"}]),
            ("Miércoles", [{"start": "14:00", "end": "17:00"}]),
        ])
        assert isinstance(saved, Ok)

        loaded = service.load_schedule(OWNER)

        assert loaded == saved.value.schedule
        assert loaded.days() == [DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY]

    def test_reload_without_cache_is_degraded(self, sql_store, file_cache):
        StudyBlockService(sql_store, file_cache).save_raw(OWNER, {
            "monday": [("09:00", "12:00")],
            "wednesday": [("14:00", "17:00")],
        })

        loaded = StudyBlockService(sql_store).load_schedule(OWNER)

        assert loaded.days() == [UNKNOWN_DAY]
        assert loaded.total_minutes == 360

    def test_resave_replaces_everything(self, sql_store, file_cache):
        service = StudyBlockService(sql_store, file_cache)
        service.save_raw(OWNER, {"monday": [("09:00", "12:00"), ("13:00", "14:00")]})

        service.save_raw(OWNER, {"martes": [("10:00", "11:00")]})

        records = sql_store.list_records(OWNER)
        assert [(r.start, r.end) for r in records] == [(600, 660)]
        assert service.load_schedule(OWNER).days() == [DayOfWeek.TUESDAY]

    def test_add_slot_persists(self, sql_store, file_cache):
        service = StudyBlockService(sql_store, file_cache)
        service.save_raw(OWNER, {"monday": [("09:00", "12:00")]})

        result = service.add_slot(OWNER, "monday", ("12:00", "13:00"))

        assert isinstance(result, Ok)
        assert [(r.start, r.end) for r in sql_store.list_records(OWNER)] == [(540, 720), (720, 780)]
        assert file_cache.read(OWNER) == result.value

    def test_add_slot_after_degraded_reload_keeps_new_day(self, sql_store, file_cache):
        StudyBlockService(sql_store).save_raw(OWNER, {
            "monday": [("09:00", "12:00")],
            "tuesday": [("09:00", "12:00")],
        })
        service = StudyBlockService(sql_store, file_cache)

        result = service.add_slot(OWNER, "miercoles", ("14:00", "15:00"))
        assert isinstance(result, Ok)

        loaded = service.load_schedule(OWNER)

        assert loaded == result.value
        assert loaded.days() == [DayOfWeek.WEDNESDAY, UNKNOWN_DAY]
        assert len(sql_store.list_records(OWNER)) == 3


class TestMigrationFlow:
    """Migrate legacy data, then continue with the regular save path."""

    def test_cache_migration_then_idempotent(self, sql_store, file_cache):
        file_cache.write(OWNER, _two_day_schedule())
        migration = StudyBlockMigrationService(sql_store)

        first = migration.migrate_from_cache(OWNER, file_cache)
        second = migration.migrate_from_cache(OWNER, file_cache)

        assert first.migrated == 2
        assert second.skipped_reason == SKIP_EXISTING_RECORDS
        assert len(sql_store.list_records(OWNER)) == 2

    def test_legacy_attributes_migration(self, sql_store):
        migration = StudyBlockMigrationService(sql_store)

        result = migration.migrate_from_legacy_attributes(OWNER, {
            "custom:firstSlotStart": "07:00",
            "custom:firstSlotEnd": "08:30",
        })

        assert result.success
        loaded = StudyBlockService(sql_store).load_schedule(OWNER)
        assert loaded.days() == [UNKNOWN_DAY]
        assert loaded.total_minutes == 90


def _two_day_schedule():
    aggregated = aggregate({"monday": [("09:00", "12:00")], "friday": [("15:00", "16:00")]})
    assert isinstance(aggregated, Ok)
    return aggregated.value.schedule
