"""
Property-based tests for schedule normalization and persistence.

These tests verify invariants that must always hold true, regardless of
the slots entered. Uses Hypothesis for property-based testing.
"""
from typing import List, Tuple

from hypothesis import given, strategies as st

from core.constants import MAX_TIME_OF_DAY
from shared_types.availability import DayOfWeek, TimeSlot
from shared_types.results import Err, Ok
from services.schedule_reconciler import flatten, reconstruct
from services.schedule_validation import normalize_day
from services.study_block_service import StudyBlockService
from services.study_block_store import InMemoryStudyBlockStore
from services.weekly_schedule_service import aggregate


@st.composite
def slot_strategy(draw) -> Tuple[int, int]:
    """Generate a valid (start, end) pair in minutes."""
    start = draw(st.integers(min_value=0, max_value=MAX_TIME_OF_DAY - 1))
    end = draw(st.integers(min_value=start + 1, max_value=MAX_TIME_OF_DAY))
    return start, end


@st.composite
def disjoint_slots_strategy(draw) -> List[Tuple[int, int]]:
    """Generate non-overlapping slots for one day, in random order."""
    points = draw(st.lists(
        st.integers(min_value=0, max_value=MAX_TIME_OF_DAY),
        unique=True,
        max_size=12,
    ))
    points.sort()
    slots = [(points[i], points[i + 1]) for i in range(0, len(points) - 1, 2)]
    return draw(st.permutations(slots))


day_strategy = st.sampled_from(list(DayOfWeek))

week_strategy = st.dictionaries(day_strategy, disjoint_slots_strategy(), max_size=7)


class TestNormalizationProperties:
    """Invariants of normalize_day."""

    @given(slot_strategy(), slot_strategy())
    def test_overlap_detection_is_symmetric(self, a, b):
        """Input order never changes the outcome."""
        assert normalize_day(DayOfWeek.MONDAY, [a, b]) == normalize_day(DayOfWeek.MONDAY, [b, a])

    @given(slot_strategy(), slot_strategy())
    def test_overlap_matches_interval_intersection(self, a, b):
        result = normalize_day(DayOfWeek.MONDAY, [a, b])

        intersects = a[0] < b[1] and b[0] < a[1]
        assert isinstance(result, Err) == intersects

    @given(st.lists(slot_strategy(), max_size=8))
    def test_accepted_days_are_sorted_and_disjoint(self, raw_slots):
        result = normalize_day(DayOfWeek.TUESDAY, raw_slots)

        if isinstance(result, Ok):
            slots = result.value.slots
            assert list(slots) == sorted(slots, key=lambda s: (s.start, s.end))
            for current, following in zip(slots, slots[1:]):
                assert current.end <= following.start

    @given(disjoint_slots_strategy())
    def test_normalization_is_a_fixed_point(self, raw_slots):
        first = normalize_day(DayOfWeek.FRIDAY, raw_slots)
        assert isinstance(first, Ok)

        assert normalize_day(DayOfWeek.FRIDAY, first.value.slots) == first


class TestAggregationProperties:
    """Invariants of weekly aggregation."""

    @given(week_strategy)
    def test_total_is_sum_of_durations(self, week):
        result = aggregate(week)
        assert isinstance(result, Ok)

        expected = sum(end - start for slots in week.values() for start, end in slots)
        assert result.value.total_minutes == expected
        assert result.value.schedule.total_minutes == expected

    @given(week_strategy)
    def test_flattening_preserves_totals(self, week):
        result = aggregate(week)
        assert isinstance(result, Ok)
        schedule = result.value.schedule

        records = flatten(schedule, "owner")

        assert len(records) == schedule.slot_count
        assert sum(r.duration_minutes for r in records) == schedule.total_minutes
        assert reconstruct(records).total_minutes == schedule.total_minutes


class TestReplaceProperties:
    """Invariants of the delete-all-then-write-all save."""

    @given(week_strategy)
    def test_replace_is_idempotent(self, week):
        result = aggregate(week)
        assert isinstance(result, Ok)
        store = InMemoryStudyBlockStore()
        service = StudyBlockService(store)

        service.replace("owner", result.value.schedule)
        first = store.list_records("owner")
        service.replace("owner", result.value.schedule)
        second = store.list_records("owner")

        # record_id is excluded from equality
        assert first == second
        assert len(second) == result.value.schedule.slot_count

    @given(week_strategy, week_strategy)
    def test_last_replace_wins(self, earlier, later):
        earlier_result = aggregate(earlier)
        later_result = aggregate(later)
        assert isinstance(earlier_result, Ok) and isinstance(later_result, Ok)
        store = InMemoryStudyBlockStore()
        service = StudyBlockService(store)

        service.replace("owner", earlier_result.value.schedule)
        service.replace("owner", later_result.value.schedule)

        stored = [TimeSlot(r.start, r.end) for r in store.list_records("owner")]
        expected = sorted(slot for _, slot in later_result.value.schedule.iter_slots())
        assert stored == expected
