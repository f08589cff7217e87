"""
Unit tests for schedule value types and error values.
"""

import copy

import pytest

from core.sentinels import UNKNOWN_DAY, UnknownDayType
from shared_types.availability import DayOfWeek, DaySchedule, TimeSlot, WeeklySchedule
from shared_types.errors import (
    DayError,
    InvalidFormat,
    OverlapDetected,
    PersistenceFailure,
    PersistencePhase,
    ZeroLength,
)
from shared_types.results import Err, Ok


class TestDayOfWeek:
    """Test DayOfWeek parsing and labels."""

    @pytest.mark.parametrize("raw, expected", [
        ("monday", DayOfWeek.MONDAY),
        ("MONDAY", DayOfWeek.MONDAY),
        ("Lunes", DayOfWeek.MONDAY),
        ("Miércoles", DayOfWeek.WEDNESDAY),
        ("miercoles", DayOfWeek.WEDNESDAY),
        (" domingo ", DayOfWeek.SUNDAY),
        (0, DayOfWeek.MONDAY),
        (4, DayOfWeek.FRIDAY),
        (DayOfWeek.SATURDAY, DayOfWeek.SATURDAY),
    ])
    def test_parse(self, raw, expected):
        assert DayOfWeek.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["", "mon", "general", 7, -1, True, None, 2.0])
    def test_parse_rejects(self, raw):
        with pytest.raises(ValueError):
            DayOfWeek.parse(raw)

    def test_labels(self):
        assert DayOfWeek.WEDNESDAY.label_en == "Wednesday"
        assert DayOfWeek.WEDNESDAY.label_es == "Miércoles"
        assert DayOfWeek.SUNDAY.weekday == 6

    def test_from_index(self):
        assert [DayOfWeek.from_index(i) for i in range(7)] == list(DayOfWeek)


class TestUnknownDay:
    """Test the UNKNOWN_DAY sentinel."""

    def test_singleton(self):
        assert UnknownDayType() is UNKNOWN_DAY
        assert copy.deepcopy(UNKNOWN_DAY) is UNKNOWN_DAY

    def test_sorts_after_weekdays(self):
        assert UNKNOWN_DAY.sort_index > DayOfWeek.SUNDAY.sort_index

    def test_serialized_name(self):
        assert UNKNOWN_DAY.value == "general"
        assert repr(UNKNOWN_DAY) == "UNKNOWN_DAY"

    def test_not_a_weekday(self):
        assert UNKNOWN_DAY not in list(DayOfWeek)


class TestTimeSlot:
    """Test TimeSlot construction and helpers."""

    @pytest.mark.parametrize("start, end", [(60, 60), (120, 60), (-1, 10), (0, 1440)])
    def test_rejects_invalid_bounds(self, start, end):
        with pytest.raises(ValueError):
            TimeSlot(start, end)

    def test_duration_and_display(self):
        slot = TimeSlot(545, 600)

        assert slot.duration_minutes == 55
        assert str(slot) == "09:05-10:00"
        assert slot.to_dict() == {"start": "09:05", "end": "10:00"}

    def test_overlaps(self):
        assert TimeSlot(540, 720).overlaps(TimeSlot(660, 780))
        assert not TimeSlot(540, 600).overlaps(TimeSlot(600, 660))


class TestWeeklySchedule:
    """Test WeeklySchedule structure."""

    def test_canonical_order_and_equality(self):
        monday = DaySchedule(day=DayOfWeek.MONDAY, slots=(TimeSlot(540, 600),))
        friday = DaySchedule(day=DayOfWeek.FRIDAY, slots=(TimeSlot(60, 120),))
        unknown = DaySchedule(day=UNKNOWN_DAY, slots=(TimeSlot(0, 30),))

        first = WeeklySchedule((unknown, friday, monday))
        second = WeeklySchedule((monday, unknown, friday))

        assert first == second
        assert first.days() == [DayOfWeek.MONDAY, DayOfWeek.FRIDAY, UNKNOWN_DAY]

    def test_empty_days_are_dropped(self):
        schedule = WeeklySchedule((DaySchedule(day=DayOfWeek.MONDAY),))

        assert schedule == WeeklySchedule.empty()
        assert schedule.is_empty
        assert DayOfWeek.MONDAY not in schedule

    def test_duplicate_days_are_rejected(self):
        with pytest.raises(ValueError):
            WeeklySchedule((
                DaySchedule(day=DayOfWeek.MONDAY, slots=(TimeSlot(0, 30),)),
                DaySchedule(day=DayOfWeek.MONDAY, slots=(TimeSlot(60, 90),)),
            ))

    def test_with_day_replaces_day(self, sample_schedule):
        updated = sample_schedule.with_day(DaySchedule(day=DayOfWeek.MONDAY, slots=(TimeSlot(0, 30),)))

        assert updated.day(DayOfWeek.MONDAY).slots == (TimeSlot(0, 30),)
        assert updated.total_minutes == 210

    def test_to_dict(self, sample_schedule):
        assert sample_schedule.to_dict() == [
            {"day": "monday", "timeSlots": [{"start": "09:00", "end": "12:00"}]},
            {"day": "wednesday", "timeSlots": [{"start": "14:00", "end": "17:00"}]},
        ]

    def test_from_dict(self, sample_schedule):
        data = [
            {"day": "Miércoles", "timeSlots": [{"start": "14:00", "end": "17:00"}]},
            {"day": "lunes", "timeSlots": [{"start": "9:00", "end": "12:00:00"}]},
        ]

        assert WeeklySchedule.from_dict(data) == sample_schedule

    def test_from_dict_general_day(self):
        schedule = WeeklySchedule.from_dict([{"day": "general", "timeSlots": [{"start": "08:00", "end": "09:00"}]}])

        assert schedule.days() == [UNKNOWN_DAY]

    def test_from_dict_rejects_bad_slot(self):
        with pytest.raises(ValueError):
            WeeklySchedule.from_dict([{"day": "monday", "timeSlots": [{"start": "10:00", "end": "09:00"}]}])


class TestErrors:
    """Test result and error values."""

    def test_result_flags(self):
        assert Ok(1).is_ok and not Ok(1).is_err
        assert Err("x").is_err and not Err("x").is_ok

    def test_messages(self):
        overlap = OverlapDetected(slot_a=TimeSlot(540, 720), slot_b=TimeSlot(660, 780))

        assert overlap.message == "Overlapping time slots: 09:00-12:00 and 11:00-13:00"
        assert DayError(day=DayOfWeek.MONDAY, error=ZeroLength(at=600)).message.startswith("monday:")
        assert "'9am'" in InvalidFormat(value="9am", reason="bad").message

    def test_persistence_failure_message(self):
        failure = PersistenceFailure(phase=PersistencePhase.DELETE, cause="timeout", owner_id="user-1")

        assert failure.message == "Failed to delete study blocks for user-1: timeout"
