"""
Persistent store for flat study-block records.

The store offers three independent calls (list, delete one, create one)
with no multi-record transaction. ``StudyBlockService.replace`` builds its
delete-all-then-write-all save on top of them.
"""

import logging
import uuid
from dataclasses import replace
from typing import Dict, List, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.study_block import StudyBlock
from shared_types.availability import FlatScheduleRecord

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the underlying store cannot complete a call."""


class StudyBlockStore(Protocol):
    """Operations the study-block service needs from persistent storage."""

    def list_records(self, owner_id: str) -> List[FlatScheduleRecord]:
        ...

    def delete_record(self, record_id: str) -> None:
        ...

    def create_record(self, record: FlatScheduleRecord) -> FlatScheduleRecord:
        ...


class SqlAlchemyStudyBlockStore:
    """
    Study-block store backed by the ``study_blocks`` table.

    The session is owned by the caller. Every call commits on its own, so a
    failure part-way through a sequence of calls leaves earlier calls applied.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_records(self, owner_id: str) -> List[FlatScheduleRecord]:
        """
        List all study blocks for an owner, ordered by start time.

        Raises:
            StorageError: If the query fails
        """
        try:
            blocks = self.db.query(StudyBlock).filter(
                StudyBlock.owner_id == owner_id
            ).order_by(StudyBlock.start_time, StudyBlock.end_time).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to list study blocks for owner {owner_id}: {e}")
            raise StorageError(str(e)) from e
        return [block.to_record() for block in blocks]

    def delete_record(self, record_id: str) -> None:
        """
        Delete one study block by id. Deleting a missing id is a no-op.

        Raises:
            StorageError: If the delete or commit fails
        """
        try:
            self.db.query(StudyBlock).filter(StudyBlock.id == record_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to delete study block {record_id}: {e}")
            raise StorageError(str(e)) from e

    def create_record(self, record: FlatScheduleRecord) -> FlatScheduleRecord:
        """
        Create one study block.

        Returns:
            The stored record, carrying its assigned id

        Raises:
            StorageError: If the insert or commit fails
        """
        block = StudyBlock.from_record(record)
        try:
            self.db.add(block)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to create study block for owner {record.owner_id}: {e}")
            raise StorageError(str(e)) from e
        return block.to_record()


class InMemoryStudyBlockStore:
    """Dictionary-backed store for single-process use and tests."""

    def __init__(self) -> None:
        self.records: Dict[str, FlatScheduleRecord] = {}

    def list_records(self, owner_id: str) -> List[FlatScheduleRecord]:
        owned = [r for r in self.records.values() if r.owner_id == owner_id]
        return sorted(owned, key=lambda r: (r.start, r.end))

    def delete_record(self, record_id: str) -> None:
        self.records.pop(record_id, None)

    def create_record(self, record: FlatScheduleRecord) -> FlatScheduleRecord:
        stored = replace(record, record_id=record.record_id or str(uuid.uuid4()))
        self.records[stored.record_id] = stored  # type: ignore[index]
        return stored
