from __future__ import annotations

from typing import Protocol, Sequence

from .model import PaymentRecord


class PaymentRepository(Protocol):
    """Append-only payment log. There is no update or delete."""

    def append(self, record: PaymentRecord) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[PaymentRecord]:
        """All payments, newest first."""

        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[PaymentRecord]:
        raise NotImplementedError
