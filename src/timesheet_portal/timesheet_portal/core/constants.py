"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Day

DAYS = tuple(d.value for d in Day)

DEFAULT_TOKEN_TTL_HOURS = 8
DEFAULT_JWT_ALGORITHM = "HS256"

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
