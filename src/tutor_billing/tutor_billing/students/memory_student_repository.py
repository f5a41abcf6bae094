from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from ..payments.memory_payment_repository import InMemoryPaymentRepository
from ..payments.model import PaymentRecord
from .model import Student, StudentProfile
from .repository import StudentRepository


def _detached(student: Student) -> Student:
    return replace(student, attendance=dict(student.attendance))


class InMemoryStudentRepository(StudentRepository):
    """Lock-guarded dict store with the same version checks as the MySQL one."""

    def __init__(self, payments: Optional[InMemoryPaymentRepository] = None):
        self._lock = threading.Lock()
        self._students: dict[str, Student] = {}
        self._payments = payments or InMemoryPaymentRepository()

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with self._lock:
            s = self._students.get(student_id)
            return _detached(s) if s else None

    def list_all(self) -> Sequence[Student]:
        with self._lock:
            items = [_detached(s) for s in self._students.values()]
        items.sort(key=lambda s: s.name.lower())
        return items

    def create(self, student: Student) -> Student:
        with self._lock:
            self._students[student.student_id] = _detached(student)
        return student

    def update_profile(self, student_id: str, profile: StudentProfile) -> bool:
        with self._lock:
            current = self._students.get(student_id)
            if not current:
                return False
            self._students[student_id] = replace(
                current,
                name=profile.name,
                hourly_rate=profile.hourly_rate,
                scheduled_days=profile.scheduled_days,
                start_time=profile.start_time,
                end_time=profile.end_time,
                image_url=profile.image_url,
                version=current.version + 1,
            )
            return True

    def delete_by_id(self, student_id: str) -> bool:
        with self._lock:
            return self._students.pop(student_id, None) is not None

    def save_ledger(self, student: Student, *, expected_version: int) -> bool:
        with self._lock:
            return self._swap(student, expected_version)

    def save_payment(self, student: Student, payment: PaymentRecord, *, expected_version: int) -> bool:
        with self._lock:
            if not self._swap(student, expected_version):
                return False
            self._payments.append(payment)
            return True

    def _swap(self, student: Student, expected_version: int) -> bool:
        current = self._students.get(student.student_id)
        if not current or current.version != expected_version:
            return False
        self._students[student.student_id] = replace(
            current,
            attendance=dict(student.attendance),
            paid_amount=student.paid_amount,
            outstanding_balance=student.outstanding_balance,
            total_collected=student.total_collected,
            cycle_anchor=student.cycle_anchor,
            version=expected_version + 1,
        )
        return True
