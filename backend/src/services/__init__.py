"""
Services package for study schedule business logic.

This package contains the validation, aggregation and reconciliation
services, plus the storage-facing study block services.
"""

from .weekly_schedule_service import WeeklyScheduleService
from .schedule_reconciler import ScheduleReconciler
from .study_block_service import StudyBlockService
from .study_block_migration_service import StudyBlockMigrationService

__all__ = [
    "WeeklyScheduleService",
    "ScheduleReconciler",
    "StudyBlockService",
    "StudyBlockMigrationService",
]
