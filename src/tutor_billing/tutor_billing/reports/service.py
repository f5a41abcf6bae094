from __future__ import annotations

from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime
from decimal import Decimal
from typing import Optional

from ..billing import ledger
from ..billing.service import BillingService
from ..common.datetime_utils import now_local
from ..core.enums import DateRangePreset
from ..core.exceptions import ValidationError
from ..payments.model import PaymentView
from ..payments.repository import PaymentRepository
from ..students.model import Student
from ..students.service import StudentService
from . import aggregator
from .aggregator import StudentDue


@dataclass(frozen=True)
class FinancialSummary:
    range_start: Optional[datetime]
    range_end: Optional[datetime]
    collected_in_range: Decimal
    payments: list[PaymentView]
    students_with_due: list[StudentDue]
    total_due: Decimal
    lifetime_collected: Decimal


@dataclass(frozen=True)
class StudentStatement:
    student: Student
    cycle_cost: Decimal
    cycle_remaining: Decimal
    outstanding_balance: Decimal
    total_due: Decimal
    year: int
    month: int
    scheduled_dates: list[date]
    projected_revenue: Decimal
    payments: list[PaymentView]


class ReportService:
    """Builds report read-models. Never writes anything except rollovers on read."""

    def __init__(self, students: StudentService, payments: PaymentRepository, billing: BillingService):
        self._students = students
        self._payments = payments
        self._billing = billing

    def list_payments(self, *, now: Optional[datetime] = None) -> list[PaymentView]:
        students = self._students.list_students(now=now)
        return aggregator.payment_history(self._payments.list_all(), students)

    def build_financial_summary(
        self,
        *,
        preset: DateRangePreset | str = DateRangePreset.CURRENT_MONTH,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> FinancialSummary:
        now = now_local(now)
        range_start, range_end = aggregator.resolve_range(preset, today=now.date(), start=start, end=end)

        students = self._students.list_students(now=now)
        in_range = aggregator.filter_payments(self._payments.list_all(), range_start, range_end)
        calc = self._billing.calculator

        return FinancialSummary(
            range_start=range_start,
            range_end=range_end,
            collected_in_range=aggregator.total_collected_in_range(in_range),
            payments=aggregator.payment_history(in_range, students),
            students_with_due=aggregator.students_with_due(students, calc),
            total_due=aggregator.total_due(students, calc),
            lifetime_collected=aggregator.lifetime_collected(students),
        )

    def build_student_statement(
        self,
        student_id: str,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> StudentStatement:
        now = now_local(now)
        year = now.year if year is None else int(year)
        month = now.month if month is None else int(month)
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if not MINYEAR <= year <= MAXYEAR:
            raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR}")

        student = self._students.get_student(student_id, now=now)
        calc = self._billing.calculator
        history = aggregator.payment_history(self._payments.list_for_student(student_id), [student])

        return StudentStatement(
            student=student,
            cycle_cost=calc.cycle_cost(student),
            cycle_remaining=ledger.cycle_shortfall(student, calc),
            outstanding_balance=student.outstanding_balance,
            total_due=ledger.due_amount(student, calc),
            year=year,
            month=month,
            scheduled_dates=aggregator.scheduled_dates_in_month(student, year, month),
            projected_revenue=aggregator.projected_month_revenue(student, year, month),
            payments=history,
        )
