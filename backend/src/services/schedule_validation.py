"""
Slot validation and per-day normalization for study schedules.

``validate_slot`` checks a single {start, end} pair; ``normalize_day`` turns
one day's raw slots into a sorted, overlap-free DaySchedule. Both are pure
and return Ok/Err values instead of raising for bad input.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, List, Tuple

from shared_types.availability import DayKey, DaySchedule, TimeSlot
from shared_types.errors import (
    InvalidFormat,
    InvertedRange,
    NormalizerError,
    OverlapDetected,
    SlotError,
    ZeroLength,
)
from shared_types.results import Err, Ok, Result
from utils.datetime_utils import parse_time_of_day

logger = logging.getLogger(__name__)

# Key pairs accepted for mapping-shaped raw slots, checked in order
_SLOT_KEY_PAIRS = (
    ("start", "end"),
    ("start_time", "end_time"),
    ("hora_inicio", "hora_fin"),
)


def _extract_bounds(raw: Any) -> Tuple[Any, Any]:
    """Pull the raw start/end values out of any supported slot shape."""
    if isinstance(raw, TimeSlot):
        return raw.start, raw.end
    if isinstance(raw, Mapping):
        for start_key, end_key in _SLOT_KEY_PAIRS:
            if start_key in raw and end_key in raw:
                return raw[start_key], raw[end_key]
        raise ValueError("missing start/end keys")
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        if len(raw) != 2:
            raise ValueError(f"expected a (start, end) pair, got {len(raw)} values")
        return raw[0], raw[1]
    raise ValueError("unsupported slot shape")


def validate_slot(raw: Any) -> Result[TimeSlot, SlotError]:
    """
    Validate a single time slot.

    Accepted shapes: a TimeSlot, a mapping with start/end keys
    ("start"/"end", "start_time"/"end_time" or "hora_inicio"/"hora_fin"),
    or a two-item sequence. Each time may be "HH:MM", a ``datetime.time``
    or a minute count.

    Args:
        raw: Slot in any accepted shape

    Returns:
        Ok(TimeSlot) or Err(InvalidFormat | InvertedRange | ZeroLength)
    """
    try:
        raw_start, raw_end = _extract_bounds(raw)
        start = parse_time_of_day(raw_start)
        end = parse_time_of_day(raw_end)
    except (ValueError, TypeError) as e:
        return Err(InvalidFormat(value=raw, reason=str(e)))

    if end == start:
        return Err(ZeroLength(at=start))
    if end < start:
        return Err(InvertedRange(start=start, end=end))
    return Ok(TimeSlot(start=start, end=end))


def find_overlap(sorted_slots: Sequence[TimeSlot]) -> Result[None, OverlapDetected]:
    """
    Scan slots already sorted by (start, end) for the first overlapping pair.

    Touching slots (``a.end == b.start``) are not overlaps.
    """
    for current, following in zip(sorted_slots, sorted_slots[1:]):
        if current.end > following.start:
            return Err(OverlapDetected(slot_a=current, slot_b=following))
    return Ok(None)


def normalize_day(day: DayKey, raw_slots: Iterable[Any]) -> Result[DaySchedule, NormalizerError]:
    """
    Validate, sort and overlap-check the slots of one day.

    Slots are sorted by start, then end. Overlapping slots are reported,
    never merged, so the user can fix the conflicting entry themselves.
    Touching slots stay as two distinct slots. An empty list is valid.

    Args:
        day: Day the slots belong to
        raw_slots: Slots in any shape ``validate_slot`` accepts

    Returns:
        Ok(DaySchedule) or Err with the first invalid slot (input order)
        or the first overlapping pair (sorted order)
    """
    slots: List[TimeSlot] = []
    for raw in raw_slots:
        result = validate_slot(raw)
        if isinstance(result, Err):
            return result
        slots.append(result.value)

    slots.sort(key=lambda slot: (slot.start, slot.end))

    overlap = find_overlap(slots)
    if isinstance(overlap, Err):
        logger.debug(f"Overlap on {day}: {overlap.error.slot_a} and {overlap.error.slot_b}")
        return overlap

    return Ok(DaySchedule(day=day, slots=tuple(slots)))
