from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from src.tutor_billing.tutor_billing.billing import ledger
from src.tutor_billing.tutor_billing.billing.calculator.all_flags_calculator import AllFlagsCostCalculator
from src.tutor_billing.tutor_billing.core.enums import Weekday
from src.tutor_billing.tutor_billing.students.model import Student, empty_attendance

CALC = AllFlagsCostCalculator()
OLD_ANCHOR = datetime(2024, 1, 6)
NEW_ANCHOR = datetime(2024, 1, 13)


def make_student(*, rate="150", attended=(), paid="0", outstanding="0", collected="0", anchor=OLD_ANCHOR) -> Student:
    attendance = empty_attendance()
    for day in attended:
        attendance[day] = True
    return Student(
        student_id="s1",
        name="Alice",
        hourly_rate=Decimal(rate),
        scheduled_days=(Weekday.MONDAY, Weekday.WEDNESDAY),
        cycle_anchor=anchor,
        attendance=attendance,
        paid_amount=Decimal(paid),
        outstanding_balance=Decimal(outstanding),
        total_collected=Decimal(collected),
    )


def test_rollover_folds_net_cost_into_outstanding():
    s = make_student(attended=(Weekday.MONDAY, Weekday.WEDNESDAY), paid="100", outstanding="50")

    rolled = ledger.roll_over(s, NEW_ANCHOR, CALC)

    assert rolled.outstanding_balance == Decimal("250")
    assert rolled.paid_amount == 0
    assert not any(rolled.attendance.values())
    assert rolled.cycle_anchor == NEW_ANCHOR


def test_rollover_with_overpayment_leaves_credit():
    s = make_student(attended=(Weekday.MONDAY,), paid="400", outstanding="0")

    rolled = ledger.roll_over(s, NEW_ANCHOR, CALC)

    assert rolled.outstanding_balance == Decimal("-250")


def test_rollover_is_noop_when_current():
    s = make_student(attended=(Weekday.MONDAY,), paid="10", anchor=NEW_ANCHOR)

    assert ledger.roll_over(s, NEW_ANCHOR, CALC) is s


def test_rollover_consolidates_multi_week_gap_in_one_step():
    s = make_student(attended=(Weekday.MONDAY,), outstanding="0")

    rolled = ledger.roll_over(s, datetime(2024, 1, 27), CALC)

    # Only the open cycle's flags are billed; skipped weeks add nothing.
    assert rolled.outstanding_balance == Decimal("150")
    assert rolled.cycle_anchor == datetime(2024, 1, 27)


def test_split_payment_outstanding_first():
    assert ledger.split_payment(Decimal("200"), Decimal("250")) == (Decimal("200"), Decimal("50"))
    assert ledger.split_payment(Decimal("200"), Decimal("80")) == (Decimal("80"), Decimal("0"))


def test_split_payment_ignores_credit():
    assert ledger.split_payment(Decimal("-30"), Decimal("100")) == (Decimal("0"), Decimal("100"))


def test_apply_payment_scenario():
    s = make_student(rate="100", attended=(Weekday.MONDAY,), outstanding="200", anchor=NEW_ANCHOR)
    assert ledger.due_amount(s, CALC) == Decimal("300")

    paid = ledger.apply_payment(s, Decimal("250"))

    assert paid.outstanding_balance == 0
    assert paid.paid_amount == Decimal("50")
    assert paid.total_collected == Decimal("250")
    assert ledger.due_amount(paid, CALC) == Decimal("50")


def test_apply_payment_with_credit_goes_to_cycle():
    s = make_student(outstanding="-40", anchor=NEW_ANCHOR)

    paid = ledger.apply_payment(s, Decimal("60"))

    assert paid.outstanding_balance == Decimal("-40")
    assert paid.paid_amount == Decimal("60")


def test_due_is_never_negative():
    s = make_student(attended=(Weekday.MONDAY,), paid="500", outstanding="-1000")
    assert ledger.due_amount(s, CALC) == 0


def test_credit_offsets_cycle_cost():
    s = make_student(attended=(Weekday.MONDAY, Weekday.WEDNESDAY), outstanding="-100")
    assert ledger.due_amount(s, CALC) == Decimal("200")


def test_cycle_shortfall_ignores_outstanding():
    s = make_student(attended=(Weekday.MONDAY,), paid="100", outstanding="500")
    assert ledger.cycle_shortfall(s, CALC) == Decimal("50")
