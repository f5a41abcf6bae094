"""Ledger rules for the weekly billing cycle.

Pure functions over `Student` values: nothing here reads the clock or touches
storage. `BillingService` decides when to call them and persists the result.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Tuple

from ..core.enums import Weekday
from ..students.model import Student, empty_attendance
from .calculator.base import CycleCostCalculator

ZERO = Decimal("0.00")


def is_stale(student: Student, anchor: datetime) -> bool:
    return student.cycle_anchor < anchor


def roll_over(student: Student, anchor: datetime, calculator: CycleCostCalculator) -> Student:
    """Close the open cycle and open the one starting at `anchor`.

    The closed cycle's net cost (cost minus what was paid toward it) is folded
    into the outstanding balance. Gaps of several weeks collapse into one step:
    only the flags of the cycle being closed are billed.
    """

    if not is_stale(student, anchor):
        return student

    net_change = calculator.cycle_cost(student) - student.paid_amount
    return replace(
        student,
        outstanding_balance=student.outstanding_balance + net_change,
        paid_amount=ZERO,
        attendance=empty_attendance(),
        cycle_anchor=anchor,
    )


def with_attendance(student: Student, updates: Mapping[Weekday, bool]) -> Student:
    attendance = dict(student.attendance)
    for day, attended in updates.items():
        attendance[day] = bool(attended)
    return replace(student, attendance=attendance)


def split_payment(outstanding: Decimal, amount: Decimal) -> Tuple[Decimal, Decimal]:
    """Return (applied to outstanding, applied to current cycle).

    A negative outstanding balance (credit) absorbs nothing.
    """

    deduct = min(max(outstanding, ZERO), amount)
    return deduct, amount - deduct


def apply_payment(student: Student, amount: Decimal) -> Student:
    deduct, remaining = split_payment(student.outstanding_balance, amount)
    return replace(
        student,
        outstanding_balance=student.outstanding_balance - deduct,
        paid_amount=student.paid_amount + remaining,
        total_collected=student.total_collected + amount,
    )


def cycle_shortfall(student: Student, calculator: CycleCostCalculator) -> Decimal:
    """Unpaid part of the open cycle alone, floored at zero."""
    return max(ZERO, calculator.cycle_cost(student) - student.paid_amount)


def due_amount(student: Student, calculator: CycleCostCalculator) -> Decimal:
    """(cycle cost - paid) + outstanding, never below zero."""
    return max(ZERO, (calculator.cycle_cost(student) - student.paid_amount) + student.outstanding_balance)
