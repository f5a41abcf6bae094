from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..core.enums import Weekday


def empty_attendance() -> dict[Weekday, bool]:
    return {day: False for day in Weekday}


@dataclass(frozen=True)
class Student:
    """Domain entity: a billing subject.

    Plain data only. Cost and due amounts are derived by the billing calculators,
    never stored here. `attendance` always carries all seven days and belongs to
    the open cycle identified by `cycle_anchor`.
    """

    student_id: str
    name: str
    hourly_rate: Decimal
    scheduled_days: tuple[Weekday, ...]
    cycle_anchor: datetime
    attendance: Mapping[Weekday, bool] = field(default_factory=empty_attendance)
    paid_amount: Decimal = Decimal("0.00")
    outstanding_balance: Decimal = Decimal("0.00")
    total_collected: Decimal = Decimal("0.00")
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    version: int = 0

    def attended(self, day: Weekday) -> bool:
        return bool(self.attendance.get(day, False))

    def is_scheduled(self, day: Weekday) -> bool:
        return day in self.scheduled_days


@dataclass(frozen=True)
class StudentProfile:
    """Create/update payload. Financial fields are never part of it."""

    name: str
    hourly_rate: Decimal
    scheduled_days: tuple[Weekday, ...] = ()
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    image_url: Optional[str] = None
