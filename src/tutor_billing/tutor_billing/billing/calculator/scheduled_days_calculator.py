from __future__ import annotations

from .base import CycleCostCalculator
from ...core.enums import Weekday
from ...students.model import Student


class ScheduledDaysCostCalculator(CycleCostCalculator):
    """Only attended flags on currently scheduled days are billed."""

    def billable_days(self, student: Student) -> list[Weekday]:
        return [day for day in Weekday if student.attended(day) and student.is_scheduled(day)]
