"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import Weekday

WEEK_START = Weekday.SATURDAY
MONEY_PLACES = 2
UNKNOWN_STUDENT_LABEL = "Unknown Student"
DEFAULT_COST_POLICY = "all_flags"
# Largest value a DECIMAL(12,2) column holds
MONEY_MAX = Decimal("9999999999.99")
