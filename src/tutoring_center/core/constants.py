"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6
MAX_COINS_PER_AWARD = 100
RECENT_USERS_LIMIT = 5

# Money columns are NUMERIC(12, 2)
MAX_AMOUNT = "9999999999.99"
