from __future__ import annotations

import threading
from typing import Sequence

from .model import PaymentRecord
from .repository import PaymentRepository


class InMemoryPaymentRepository(PaymentRepository):
    """Process-local payment log used when no database is configured, and in tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: list[PaymentRecord] = []

    def append(self, record: PaymentRecord) -> None:
        with self._lock:
            self._records.append(record)

    def list_all(self) -> Sequence[PaymentRecord]:
        with self._lock:
            items = list(self._records)
        items.sort(key=lambda r: r.paid_at, reverse=True)
        return items

    def list_for_student(self, student_id: str) -> Sequence[PaymentRecord]:
        return [r for r in self.list_all() if r.student_id == student_id]
