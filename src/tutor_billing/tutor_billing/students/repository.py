from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..payments.model import PaymentRecord
from .model import Student, StudentProfile


class StudentRepository(Protocol):
    """Repository interface for students.

    Every write is conditional on `expected_version` (compare-and-swap) and bumps
    the stored version by one. A write that returns False lost the race and
    changed nothing.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """All students ordered by name."""

        raise NotImplementedError

    def create(self, student: Student) -> Student:
        raise NotImplementedError

    def update_profile(self, student_id: str, profile: StudentProfile) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError

    def save_ledger(self, student: Student, *, expected_version: int) -> bool:
        """Persist attendance flags, paid/outstanding/collected and cycle anchor."""

        raise NotImplementedError

    def save_payment(self, student: Student, payment: PaymentRecord, *, expected_version: int) -> bool:
        """Persist the ledger state and append the payment atomically."""

        raise NotImplementedError
