"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_VACATION_DAYS = 25
MAX_REASON_LENGTH = 200
DEFAULT_HISTORY_LIMIT = 200
DEFAULT_PENDING_LIMIT = 500

MIN_TEAM_YEAR = 2000
MAX_TEAM_YEAR = 2100

# Python weekday() values counted as weekend when weekends are excluded.
WEEKEND_DAYS = frozenset({5, 6})
