from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..common.datetime_utils import now_local, week_anchor
from ..common.validators import require_positive_amount
from ..core.enums import Weekday
from ..core.exceptions import ConcurrentUpdateError, NotFoundError, ValidationError
from ..payments.model import PaymentRecord
from ..students.model import Student
from ..students.repository import StudentRepository
from . import ledger
from .calculator.all_flags_calculator import AllFlagsCostCalculator
from .calculator.base import CycleCostCalculator

logger = logging.getLogger(__name__)


class BillingService:
    """Use case: weekly billing cycle (rollover on read, attendance, payments)."""

    def __init__(
        self,
        students: StudentRepository,
        *,
        calculator: Optional[CycleCostCalculator] = None,
    ):
        self._students = students
        self._calculator = calculator or AllFlagsCostCalculator()

    @property
    def calculator(self) -> CycleCostCalculator:
        return self._calculator

    def cycle_cost(self, student: Student) -> Decimal:
        return self._calculator.cycle_cost(student)

    def due_amount(self, student: Student) -> Decimal:
        return ledger.due_amount(student, self._calculator)

    def ensure_current(self, student: Student, *, now: Optional[datetime] = None) -> Student:
        """Roll the student over if its cycle anchor is older than this week's.

        Losing the compare-and-swap means another reader already rolled this
        student over; the winner's record is re-read and returned instead.
        """

        anchor = week_anchor(now_local(now))
        if not ledger.is_stale(student, anchor):
            return student

        rolled = ledger.roll_over(student, anchor, self._calculator)
        if self._students.save_ledger(rolled, expected_version=student.version):
            logger.info(
                "Rolled over student %s to cycle %s (outstanding %s -> %s)",
                student.student_id,
                anchor.isoformat(),
                student.outstanding_balance,
                rolled.outstanding_balance,
            )
            return replace(rolled, version=student.version + 1)

        fresh = self._get(student.student_id)
        if ledger.is_stale(fresh, anchor):
            logger.warning("Rollover conflict for student %s", student.student_id)
            raise ConcurrentUpdateError(f"Student {student.student_id} changed during rollover")
        return fresh

    def read_student(self, student_id: str, *, now: Optional[datetime] = None) -> Student:
        return self.ensure_current(self._get(student_id), now=now)

    def set_attendance(self, student_id: str, day: Weekday | str, attended: bool, *, now: Optional[datetime] = None) -> Student:
        return self.set_attendance_bulk(student_id, {day: attended}, now=now)

    def set_attendance_bulk(
        self,
        student_id: str,
        updates: Mapping[Weekday | str, bool],
        *,
        now: Optional[datetime] = None,
    ) -> Student:
        parsed = {_as_weekday(day): bool(v) for day, v in updates.items()}
        if not parsed:
            raise ValidationError("No attendance changes given")

        student = self.read_student(student_id, now=now)
        updated = ledger.with_attendance(student, parsed)
        if not self._students.save_ledger(updated, expected_version=student.version):
            raise ConcurrentUpdateError(f"Student {student_id} changed while saving attendance")
        return replace(updated, version=student.version + 1)

    def apply_payment(self, student_id: str, amount, *, now: Optional[datetime] = None) -> PaymentRecord:
        """Apply a payment outstanding-first, then to the open cycle.

        The full amount is added to total_collected and logged as one PaymentRecord.
        """

        value = require_positive_amount(amount)
        now = now_local(now)

        student = self.read_student(student_id, now=now)
        updated = ledger.apply_payment(student, value)
        record = PaymentRecord(
            payment_id=str(uuid.uuid4()),
            student_id=student.student_id,
            amount=value,
            paid_at=now,
        )
        if not self._students.save_payment(updated, record, expected_version=student.version):
            raise ConcurrentUpdateError(f"Student {student_id} changed while applying payment")

        logger.info(
            "Payment %s of %s for student %s (outstanding %s -> %s, paid %s -> %s)",
            record.payment_id,
            value,
            student_id,
            student.outstanding_balance,
            updated.outstanding_balance,
            student.paid_amount,
            updated.paid_amount,
        )
        return record

    def _get(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student


def _as_weekday(day: Weekday | str) -> Weekday:
    if isinstance(day, Weekday):
        return day
    try:
        return Weekday.parse(day)
    except (ValueError, AttributeError):
        raise ValidationError(f"Unknown weekday: {day!r}")
