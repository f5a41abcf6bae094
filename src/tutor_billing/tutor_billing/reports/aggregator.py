"""Read-only aggregations over rolled-over students and the payment log."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ..billing import ledger
from ..billing.calculator.base import CycleCostCalculator
from ..common.datetime_utils import (
    days_in_month,
    end_of_day,
    month_bounds,
    previous_month,
    start_of_day,
    weekday_of,
)
from ..core.constants import UNKNOWN_STUDENT_LABEL
from ..core.enums import DateRangePreset
from ..core.exceptions import ValidationError
from ..payments.model import PaymentRecord, PaymentView
from ..students.model import Student

ZERO = Decimal("0.00")

DateRange = Tuple[Optional[datetime], Optional[datetime]]


@dataclass(frozen=True)
class StudentDue:
    student: Student
    due: Decimal


def total_due(students: Iterable[Student], calculator: CycleCostCalculator) -> Decimal:
    return sum((ledger.due_amount(s, calculator) for s in students), ZERO)


def students_with_due(students: Iterable[Student], calculator: CycleCostCalculator) -> list[StudentDue]:
    rows = [StudentDue(student=s, due=ledger.due_amount(s, calculator)) for s in students]
    rows = [r for r in rows if r.due > 0]
    rows.sort(key=lambda r: r.due, reverse=True)
    return rows


def _in_range(ts: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and ts < start:
        return False
    if end is not None and ts > end:
        return False
    return True


def filter_payments(
    payments: Iterable[PaymentRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[PaymentRecord]:
    """Payments with start <= paid_at <= end, newest first. None bounds are open."""

    items = [p for p in payments if _in_range(p.paid_at, start, end)]
    items.sort(key=lambda p: p.paid_at, reverse=True)
    return items


def total_collected_in_range(
    payments: Iterable[PaymentRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Decimal:
    return sum((p.amount for p in payments if _in_range(p.paid_at, start, end)), ZERO)


def resolve_range(
    preset: DateRangePreset | str,
    *,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> DateRange:
    """Turn a named preset into inclusive datetime bounds.

    CUSTOM without a start is unbounded; its end defaults to the end of `today`.
    """

    try:
        preset = DateRangePreset(preset)
    except ValueError:
        raise ValidationError(f"Unknown date range: {preset!r}")

    if preset == DateRangePreset.ALL_TIME:
        return None, None
    if preset == DateRangePreset.CURRENT_MONTH:
        return month_bounds(today.year, today.month)
    if preset == DateRangePreset.LAST_MONTH:
        return month_bounds(*previous_month(today.year, today.month))

    if start is None:
        return None, None
    last = end or today
    if last < start:
        raise ValidationError("End date must not be before start date")
    return start_of_day(start), end_of_day(last)


def lifetime_collected(students: Iterable[Student]) -> Decimal:
    return sum((s.total_collected for s in students), ZERO)


def collected_by_student(payments: Iterable[PaymentRecord]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for p in payments:
        totals[p.student_id] += p.amount
    return dict(totals)


def collected_mismatches(students: Iterable[Student], payments: Iterable[PaymentRecord]) -> dict[str, Tuple[Decimal, Decimal]]:
    """Students whose total_collected disagrees with their logged payments.

    Returns {student_id: (total_collected, log sum)}; empty when consistent.
    """

    logged = collected_by_student(payments)
    out = {}
    for s in students:
        from_log = logged.get(s.student_id, ZERO)
        if s.total_collected != from_log:
            out[s.student_id] = (s.total_collected, from_log)
    return out


def payment_history(payments: Iterable[PaymentRecord], students: Iterable[Student]) -> list[PaymentView]:
    names = {s.student_id: s.name for s in students}
    rows = [
        PaymentView(
            payment_id=p.payment_id,
            student_id=p.student_id,
            student_name=names.get(p.student_id, UNKNOWN_STUDENT_LABEL),
            amount=p.amount,
            paid_at=p.paid_at,
        )
        for p in payments
    ]
    rows.sort(key=lambda r: r.paid_at, reverse=True)
    return rows


def scheduled_dates_in_month(student: Student, year: int, month: int) -> list[date]:
    return [d for d in days_in_month(year, month) if student.is_scheduled(weekday_of(d))]


def projected_month_revenue(student: Student, year: int, month: int) -> Decimal:
    """What the month would bill if every scheduled class were attended."""
    return student.hourly_rate * len(scheduled_dates_in_month(student, year, month))

