"""
Fallback cache for day-grouped weekly schedules.

The cache holds the onboarding "welcome form" blob a user filled in, whose
``tiempoDisponible`` field keeps each slot's weekday. It is never
authoritative: unreadable or invalid blobs are logged and treated as absent.
"""

import json
import logging
import pathlib
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

from pydantic import BaseModel, Field, ValidationError

from core.constants import UNKNOWN_DAY_NAME
from core.sentinels import UNKNOWN_DAY
from shared_types.availability import DaySchedule, TimeSlot, WeeklySchedule
from shared_types.results import Err
from services.schedule_validation import validate_slot
from services.study_block_store import StorageError
from services.weekly_schedule_service import WeeklyScheduleService

logger = logging.getLogger(__name__)


# Blob schema validation models
class CachedTimeSlot(BaseModel):
    """Schema for one cached time slot."""
    start: str
    end: str


class CachedDaySchedule(BaseModel):
    """Schema for one cached day."""
    day: str
    timeSlots: List[CachedTimeSlot] = Field(default_factory=list)


class WelcomeFormData(BaseModel):
    """Schema for the onboarding blob stored per user."""
    nombre: str = Field(default="", description="Display name entered during onboarding")
    estudio: str = Field(default="", description="Area of study")
    youtubeUrl: str = Field(default="", description="Playlist or video URL the user wants to study")
    tiempoDisponible: List[CachedDaySchedule] = Field(default_factory=list, description="Available study time grouped by weekday")

    def to_schedule(self) -> Optional[WeeklySchedule]:
        """
        Normalize the cached days, or None if they do not form a valid schedule.

        Named weekdays are normalized and overlap-checked. The "general"
        bucket holds slots rebuilt from flat records that may come from
        several weekdays, so its slots are only validated and sorted.
        """
        days = []
        general_slots: List[TimeSlot] = []
        for entry in self.tiempoDisponible:
            raw_slots = [slot.model_dump() for slot in entry.timeSlots]
            if entry.day.strip().lower() != UNKNOWN_DAY_NAME:
                days.append((entry.day, raw_slots))
                continue
            for raw in raw_slots:
                slot = validate_slot(raw)
                if isinstance(slot, Err):
                    logger.warning(f"Ignoring cached schedule: {slot.error.message}")
                    return None
                general_slots.append(slot.value)

        result = WeeklyScheduleService.aggregate(days)
        if isinstance(result, Err):
            logger.warning(f"Ignoring cached schedule: {result.error.message}")
            return None
        schedule = result.value.schedule
        if general_slots:
            schedule = schedule.with_day(DaySchedule(day=UNKNOWN_DAY, slots=tuple(sorted(general_slots))))
        return schedule


class ScheduleCache(Protocol):
    """Read/write access to an owner's day-grouped schedule blob."""

    def read(self, owner_id: str) -> Optional[WeeklySchedule]:
        ...

    def write(self, owner_id: str, schedule: WeeklySchedule) -> None:
        ...


class InMemoryScheduleCache:
    """Process-local schedule cache."""

    def __init__(self) -> None:
        self._schedules: Dict[str, WeeklySchedule] = {}

    def read(self, owner_id: str) -> Optional[WeeklySchedule]:
        return self._schedules.get(owner_id)

    def write(self, owner_id: str, schedule: WeeklySchedule) -> None:
        self._schedules[owner_id] = schedule

    def clear(self, owner_id: str) -> None:
        self._schedules.pop(owner_id, None)


class JsonFileScheduleCache:
    """
    Schedule cache storing one JSON welcome-form blob per owner.

    Writing a schedule keeps the other onboarding fields already in the blob.
    """

    def __init__(self, directory: str | pathlib.Path):
        self.directory = pathlib.Path(directory)

    def _path(self, owner_id: str) -> pathlib.Path:
        return self.directory / f"{quote(owner_id, safe='')}.json"

    def read_form(self, owner_id: str) -> Optional[WelcomeFormData]:
        """Load and validate the raw blob, or None if it is missing or unusable."""
        path = self._path(owner_id)
        if not path.exists():
            return None
        try:
            data: Any = json.loads(path.read_text(encoding="utf-8"))
            return WelcomeFormData.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable schedule cache for owner {owner_id}: {e}")
            return None

    def read(self, owner_id: str) -> Optional[WeeklySchedule]:
        form = self.read_form(owner_id)
        if form is None:
            return None
        return form.to_schedule()

    def write(self, owner_id: str, schedule: WeeklySchedule) -> None:
        """
        Store ``schedule`` as the owner's ``tiempoDisponible``.

        Raises:
            StorageError: If the blob cannot be written
        """
        form = self.read_form(owner_id) or WelcomeFormData()
        form.tiempoDisponible = [
            CachedDaySchedule.model_validate(day) for day in schedule.to_dict()
        ]
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(owner_id).write_text(
                json.dumps(form.model_dump(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.exception(f"Failed to write schedule cache for owner {owner_id}: {e}")
            raise StorageError(str(e)) from e
