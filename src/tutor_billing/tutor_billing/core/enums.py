from __future__ import annotations

from enum import Enum


class Weekday(str, Enum):
    """Days of the week, in `datetime.weekday()` order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def position(self) -> int:
        return _WEEKDAY_ORDER.index(self)

    @property
    def column(self) -> str:
        """Attendance column name used by the `students` table."""
        return f"{self.value.lower()}_attended"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        return _WEEKDAY_ORDER[index % 7]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Accept 'Monday', 'monday' or ' MONDAY '."""
        key = (value or "").strip().capitalize()
        return cls(key)


_WEEKDAY_ORDER = list(Weekday)


class DateRangePreset(str, Enum):
    """Named ranges used by the collected-payments report."""

    CURRENT_MONTH = "current_month"
    LAST_MONTH = "last_month"
    ALL_TIME = "all_time"
    CUSTOM = "custom"


class StorageBackend(str, Enum):
    MYSQL = "mysql"
    MEMORY = "memory"
