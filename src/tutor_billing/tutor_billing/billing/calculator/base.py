from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...core.enums import Weekday
from ...students.model import Student


class CycleCostCalculator(ABC):
    """Calculator interface (Strategy Pattern for cycle cost)."""

    @abstractmethod
    def billable_days(self, student: Student) -> list[Weekday]:
        raise NotImplementedError

    def cycle_cost(self, student: Student) -> Decimal:
        return student.hourly_rate * len(self.billable_days(student))
