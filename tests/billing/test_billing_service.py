from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest

from src.tutor_billing.tutor_billing.billing.service import BillingService
from src.tutor_billing.tutor_billing.core.enums import Weekday
from src.tutor_billing.tutor_billing.core.exceptions import (
    ConcurrentUpdateError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from src.tutor_billing.tutor_billing.payments.memory_payment_repository import InMemoryPaymentRepository
from src.tutor_billing.tutor_billing.reports.aggregator import collected_by_student, collected_mismatches
from src.tutor_billing.tutor_billing.students.memory_student_repository import InMemoryStudentRepository
from src.tutor_billing.tutor_billing.students.model import Student, empty_attendance

WEEK1_MON = datetime(2024, 1, 8, 15, 0)
WEEK1_FRI = datetime(2024, 1, 12, 20, 0)
WEEK2_SAT = datetime(2024, 1, 13, 9, 0)
WEEK2_SUN = datetime(2024, 1, 14, 9, 0)


def seed(repo, *, student_id="s1", rate="150", attended=(), paid="0", outstanding="0", anchor=datetime(2024, 1, 6)):
    attendance = empty_attendance()
    for day in attended:
        attendance[day] = True
    repo.create(
        Student(
            student_id=student_id,
            name=student_id.upper(),
            hourly_rate=Decimal(rate),
            scheduled_days=(Weekday.MONDAY, Weekday.WEDNESDAY),
            cycle_anchor=anchor,
            attendance=attendance,
            paid_amount=Decimal(paid),
            outstanding_balance=Decimal(outstanding),
        )
    )


@pytest.fixture()
def repos():
    payments = InMemoryPaymentRepository()
    return InMemoryStudentRepository(payments), payments


def test_read_in_same_week_does_not_roll_over(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY,), paid="20")
    svc = BillingService(students)

    s = svc.read_student("s1", now=WEEK1_FRI)

    assert s.attended(Weekday.MONDAY)
    assert s.paid_amount == Decimal("20")
    assert s.version == 0


def test_read_across_boundary_rolls_over_and_persists(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY, Weekday.WEDNESDAY), paid="100", outstanding="50")
    svc = BillingService(students)

    s = svc.read_student("s1", now=WEEK2_SAT)

    assert s.cycle_anchor == datetime(2024, 1, 13)
    assert s.outstanding_balance == Decimal("250")
    assert s.paid_amount == 0
    assert not any(s.attendance.values())

    stored = students.get_by_id("s1")
    assert stored.outstanding_balance == Decimal("250")
    assert stored.cycle_anchor == datetime(2024, 1, 13)


def test_second_read_is_noop(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY,))
    svc = BillingService(students)

    first = svc.read_student("s1", now=WEEK2_SAT)
    second = svc.read_student("s1", now=WEEK2_SUN)

    assert first.outstanding_balance == second.outstanding_balance == Decimal("150")
    assert students.get_by_id("s1").version == 1


def test_lost_rollover_race_returns_winner_without_double_apply(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY,))
    svc = BillingService(students)

    stale_a = students.get_by_id("s1")
    stale_b = students.get_by_id("s1")

    a = svc.ensure_current(stale_a, now=WEEK2_SAT)
    b = svc.ensure_current(stale_b, now=WEEK2_SAT)

    assert a.outstanding_balance == b.outstanding_balance == Decimal("150")
    assert students.get_by_id("s1").outstanding_balance == Decimal("150")


def test_rollover_conflict_that_stays_stale_raises(repos):
    students, _ = repos
    seed(students)

    class AlwaysConflicting(InMemoryStudentRepository):
        def save_ledger(self, student, *, expected_version):
            return False

    conflicting = AlwaysConflicting()
    conflicting.create(students.get_by_id("s1"))
    svc = BillingService(conflicting)

    with pytest.raises(ConcurrentUpdateError):
        svc.read_student("s1", now=WEEK2_SAT)


def test_set_attendance_only_changes_flag(repos):
    students, _ = repos
    seed(students, paid="10", outstanding="5")
    svc = BillingService(students)

    s = svc.set_attendance("s1", "wednesday", True, now=WEEK1_MON)

    assert s.attended(Weekday.WEDNESDAY)
    stored = students.get_by_id("s1")
    assert stored.attended(Weekday.WEDNESDAY)
    assert stored.paid_amount == Decimal("10")
    assert stored.outstanding_balance == Decimal("5")
    assert svc.due_amount(stored) == Decimal("145")


def test_set_attendance_rolls_over_first(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY,))
    svc = BillingService(students)

    s = svc.set_attendance("s1", Weekday.SATURDAY, True, now=WEEK2_SAT)

    assert s.outstanding_balance == Decimal("150")
    assert s.attended(Weekday.SATURDAY)
    assert not s.attended(Weekday.MONDAY)


def test_set_attendance_bulk_and_invalid_day(repos):
    students, _ = repos
    seed(students)
    svc = BillingService(students)

    s = svc.set_attendance_bulk("s1", {"Monday": True, "Wednesday": True}, now=WEEK1_MON)
    assert svc.cycle_cost(s) == Decimal("300")

    with pytest.raises(ValidationError):
        svc.set_attendance("s1", "Funday", True, now=WEEK1_MON)


def test_payment_outstanding_first(repos):
    students, payments = repos
    seed(students, rate="100", attended=(Weekday.MONDAY,), outstanding="200", anchor=datetime(2024, 1, 6))
    svc = BillingService(students)

    record = svc.apply_payment("s1", 250, now=WEEK1_FRI)

    s = students.get_by_id("s1")
    assert s.outstanding_balance == 0
    assert s.paid_amount == Decimal("50")
    assert s.total_collected == Decimal("250")
    assert svc.due_amount(s) == Decimal("50")

    assert record.amount == Decimal("250")
    assert record.paid_at == WEEK1_FRI
    assert payments.list_all() == [record]


@pytest.mark.parametrize("amount", [-10, 0, "0.00", "abc", None, "NaN", float("inf"), "1e30", "10000000000"])
def test_invalid_payment_is_rejected_without_side_effects(repos, amount):
    students, payments = repos
    seed(students, attended=(Weekday.MONDAY,), paid="10", outstanding="20")
    before = students.get_by_id("s1")
    svc = BillingService(students)

    with pytest.raises(InvalidAmountError):
        svc.apply_payment("s1", amount, now=WEEK1_FRI)

    assert students.get_by_id("s1") == before
    assert payments.list_all() == []


def test_payment_triggers_rollover_before_applying(repos):
    students, _ = repos
    seed(students, attended=(Weekday.MONDAY,), paid="0", outstanding="0")
    svc = BillingService(students)

    svc.apply_payment("s1", 100, now=WEEK2_SAT)

    s = students.get_by_id("s1")
    # 150 rolled into outstanding, then 100 of it paid off.
    assert s.outstanding_balance == Decimal("50")
    assert s.paid_amount == 0
    assert s.cycle_anchor == datetime(2024, 1, 13)


def test_total_collected_matches_payment_log(repos):
    students, payments = repos
    seed(students, student_id="a", attended=(Weekday.MONDAY,))
    seed(students, student_id="b", outstanding="75")
    svc = BillingService(students)

    for sid, amount, now in [
        ("a", "40", WEEK1_MON),
        ("b", "100", WEEK1_MON),
        ("a", "500", WEEK1_FRI),
        ("a", "12.50", WEEK2_SAT),
        ("b", "0.01", WEEK2_SUN),
    ]:
        svc.apply_payment(sid, amount, now=now)

    all_students = students.list_all()
    assert collected_mismatches(all_students, payments.list_all()) == {}
    assert collected_by_student(payments.list_all()) == {"a": Decimal("552.50"), "b": Decimal("100.01")}


def test_unknown_student(repos):
    students, _ = repos
    svc = BillingService(students)

    with pytest.raises(NotFoundError):
        svc.read_student("nope", now=WEEK1_MON)
    with pytest.raises(NotFoundError):
        svc.apply_payment("nope", 10, now=WEEK1_MON)
    with pytest.raises(NotFoundError):
        svc.set_attendance("nope", "Monday", True, now=WEEK1_MON)


def test_payment_conflict_raises_and_logs_nothing(repos):
    students, payments = repos
    seed(students)

    class StaleWrites(InMemoryStudentRepository):
        def save_payment(self, student, payment, *, expected_version):
            return super().save_payment(student, payment, expected_version=expected_version + 1)

    racing = StaleWrites(payments)
    racing.create(replace(students.get_by_id("s1")))
    svc = BillingService(racing)

    with pytest.raises(ConcurrentUpdateError):
        svc.apply_payment("s1", 10, now=WEEK1_MON)
    assert payments.list_all() == []


def test_aware_now_is_compared_as_local_time(repos):
    students, payments = repos
    seed(students, attended=(Weekday.MONDAY,))
    svc = BillingService(students)

    s = svc.read_student("s1", now=WEEK2_SAT.astimezone())
    record = svc.apply_payment("s1", 50, now=WEEK2_SUN.astimezone())

    assert s.cycle_anchor == datetime(2024, 1, 13)
    assert s.outstanding_balance == Decimal("150")
    assert record.paid_at == WEEK2_SUN
    assert record.paid_at.tzinfo is None
