"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CLASS_START = "16:00"
DEFAULT_LATE_CUTOFF_MINUTES = 15

RECENT_SCORES_LIMIT = 5
TREND_MIN_POINTS = 3
TREND_THRESHOLD = 5
