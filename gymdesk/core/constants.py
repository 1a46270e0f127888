"""Business limits and fixed labels shared across modules.

Deployment-specific values live in ``gymdesk.core.config``.
"""

# Paging for search endpoints
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

DEFAULT_POPULAR_PACKAGES_LIMIT: int = 5

# Membership packages
PACKAGE_NAME_MIN_LENGTH: int = 3
PACKAGE_NAME_MAX_LENGTH: int = 100

# Scheduling
UPCOMING_SESSIONS_WINDOW_DAYS: int = 7
RECURRING_CLASS_TITLE_DATE_FORMAT: str = "%b %d"  # "Yoga - Jan 08"
# Weeks or months a recurring schedule may span
MAX_RECURRENCE_DURATION: int = 104

# Members
DEFAULT_MEMBER_ACTIVITY_LIMIT: int = 50

# Discounts
DISCOUNT_CODE_MIN_LENGTH: int = 3

# Redis keys
USAGE_STATS_CACHE_PREFIX: str = "usage_stats"
INSTRUCTORS_CACHE_KEY: str = "instructors"
