from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PaymentRecord:
    """Immutable payment event. Created only by a successful payment."""

    payment_id: str
    student_id: str
    amount: Decimal
    paid_at: datetime


@dataclass(frozen=True)
class PaymentView:
    """Read-model for history tables: payment joined with the student's name."""

    payment_id: str
    student_id: str
    student_name: str
    amount: Decimal
    paid_at: datetime
