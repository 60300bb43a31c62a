"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Working day (minute of day)
EXPECTED_CHECK_IN_MINUTE = 10 * 60
EXPECTED_CHECK_OUT_START_MINUTE = 17 * 60
EXPECTED_CHECK_OUT_END_MINUTE = 18 * 60
EARLY_CHECKOUT_HALF_DAY_MINUTE = 14 * 60

# Repeat occurrences at or above this count get a "(consecutive)" label
CONSECUTIVE_LABEL_THRESHOLD = 3

TIMESHEET_DEADLINE_HOURS = 24

LATE_PENALTY_MULTIPLIER = 10

DEFAULT_MAX_WORKERS = 4
DEFAULT_UPSERT_ATTEMPTS = 3
