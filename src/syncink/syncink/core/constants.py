"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_DAILY_DEADLINE = time(18, 0)
DEFAULT_TIME_ZONE = "UTC"
DEFAULT_ALLOW_RETROACTIVE = True
DEFAULT_RETROACTIVE_REQUIRES_APPROVAL = True
DEFAULT_AUTO_ABSENT_AFTER_DEADLINE = True

WEEKLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_DAYS = 30

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6
AUTO_APPROVAL_COMMENT = "Approved automatically"
