from typing import Any

from core.constants import UNKNOWN_DAY_NAME


class UnknownDayType:
    """
    Type for the UNKNOWN_DAY sentinel, the bucket for slots with no weekday.

    Flat study-block records do not store a day of week, so a schedule rebuilt
    from them alone cannot say which day a slot belongs to. Those slots are
    grouped under this sentinel instead of being assigned a made-up weekday.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(UnknownDayType, cls).__new__(cls)
        return cls._instance

    @property
    def value(self) -> str:
        return UNKNOWN_DAY_NAME

    @property
    def sort_index(self) -> int:
        # After every real weekday (0..6)
        return 7

    def __repr__(self) -> str:
        return "UNKNOWN_DAY"

    def __str__(self) -> str:
        return UNKNOWN_DAY_NAME

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UnknownDayType)

    def __hash__(self) -> int:
        return hash("UNKNOWN_DAY")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo: Any):
        return self


UNKNOWN_DAY = UnknownDayType()
