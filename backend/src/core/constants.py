"""Application constants and configuration values."""

# Time-of-day bounds (minutes since midnight, inclusive range 0..1439)
MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR
MAX_TIME_OF_DAY = MINUTES_PER_DAY - 1
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY

# Placeholder day stored for slots whose weekday is unknown.
# Flat study-block records carry no day-of-week column, so anything
# rebuilt from them alone lands under this bucket.
UNKNOWN_DAY_NAME = "general"

# Database field lengths
MAX_OWNER_ID_LENGTH = 128
RECORD_ID_LENGTH = 36  # str(uuid4())

# Legacy Cognito custom attributes written by the old sign-up form.
# Up to five (start, end) pairs, read in this order.
LEGACY_SLOT_ATTRIBUTE_PAIRS = [
    ("custom:firstSlotStart", "custom:firstSlotEnd"),
    ("custom:secondSlotStart", "custom:secondSlotEnd"),
    ("custom:thirdSlotStart", "custom:thirdSlotEnd"),
    ("custom:fourthSlotStart", "custom:fourthSlotEnd"),
    ("custom:fifthSlotStart", "custom:fifthSlotEnd"),
]

# Default horizon when searching for the next preferred study slot
NEXT_SLOT_SEARCH_DAYS = 7
