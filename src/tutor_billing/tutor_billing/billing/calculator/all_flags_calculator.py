from __future__ import annotations

from .base import CycleCostCalculator
from ...core.enums import Weekday
from ...students.model import Student


class AllFlagsCostCalculator(CycleCostCalculator):
    """Every attended flag is billed, whether or not the day is still scheduled."""

    def billable_days(self, student: Student) -> list[Weekday]:
        return [day for day in Weekday if student.attended(day)]
