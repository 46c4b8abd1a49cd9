"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ACCESS_COOKIE = "token"
REFRESH_COOKIE = "refreshToken"
LOGOUT_COOKIE_SECONDS = 10

DEFAULT_ACCESS_MINUTES = 60
DEFAULT_REFRESH_DAYS = 7
JWT_ALGORITHM = "HS256"

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

DEFAULT_LOW_INVENTORY_THRESHOLD = 10
RECENT_ORDERS_LIMIT = 5
TOP_PRODUCTS_LIMIT = 10

MIN_PASSWORD_LENGTH = 6
