"""
Study block model for a user's weekly study availability.

Each record is one study time range. The table has no day-of-week column:
slots are stored flat, and the weekday grouping lives only in the fallback
schedule cache.
"""

import uuid
from datetime import datetime, time
from typing import Optional

from sqlalchemy import String, Time, TIMESTAMP, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import MAX_OWNER_ID_LENGTH, RECORD_ID_LENGTH
from core.database import Base
from shared_types.availability import FlatScheduleRecord
from utils.datetime_utils import minutes_to_time, time_to_minutes


def _new_record_id() -> str:
    return str(uuid.uuid4())


class StudyBlock(Base):
    """
    Model for storing one study time block of a user.

    The model supports:
    - Multiple blocks per user
    - Flat storage (no day association)
    - Denormalized duration for reporting
    """

    __tablename__ = "study_blocks"

    id: Mapped[str] = mapped_column(String(RECORD_ID_LENGTH), primary_key=True, default=_new_record_id)
    """Unique identifier for the study block (UUID string)."""

    owner_id: Mapped[str] = mapped_column(String(MAX_OWNER_ID_LENGTH))
    """Identifier of the user owning the block."""

    start_time: Mapped[time] = mapped_column(Time)
    """Start time of the study block."""

    end_time: Mapped[time] = mapped_column(Time)
    """End time of the study block."""

    duration_minutes: Mapped[Optional[int]] = mapped_column(nullable=True)
    """Duration in minutes; recomputed on every write."""

    # Metadata
    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the study block was created."""

    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the study block was last updated."""

    __table_args__ = (
        Index('idx_study_blocks_owner', 'owner_id'),
        Index('idx_study_blocks_owner_start', 'owner_id', 'start_time'),
    )

    @classmethod
    def from_record(cls, record: FlatScheduleRecord) -> "StudyBlock":
        """Build a new row from a flat record, assigning an id if it has none."""
        return cls(
            id=record.record_id or _new_record_id(),
            owner_id=record.owner_id,
            start_time=minutes_to_time(record.start),
            end_time=minutes_to_time(record.end),
            duration_minutes=record.end - record.start,
        )

    def to_record(self) -> FlatScheduleRecord:
        """Convert the row to a flat record."""
        start = time_to_minutes(self.start_time)
        end = time_to_minutes(self.end_time)
        return FlatScheduleRecord(
            start=start,
            end=end,
            duration_minutes=self.duration_minutes if self.duration_minutes is not None else end - start,
            owner_id=self.owner_id,
            record_id=self.id,
        )

    def __repr__(self) -> str:
        return f"<StudyBlock(owner_id={self.owner_id}, {self.start_time}-{self.end_time})>"
