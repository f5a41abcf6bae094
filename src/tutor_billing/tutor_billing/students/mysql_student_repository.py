from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, format_hhmm
from ..payments.model import PaymentRecord
from ..payments.mysql_payment_repository import insert_payment
from .model import Student, StudentProfile
from .repository import StudentRepository

_FLAG_COLUMNS = [day.column for day in Weekday]

_SELECT = f"""
    SELECT student_id, name, hourly_rate, scheduled_days, start_time, end_time, image_url,
           {", ".join(_FLAG_COLUMNS)},
           paid_amount, outstanding_balance, total_collected, cycle_anchor, created_at, version
    FROM students
"""

_LEDGER_SET = ", ".join(f"{c}=%s" for c in _FLAG_COLUMNS)


def _days_to_db(days: Sequence[Weekday]) -> str:
    return ",".join(d.value for d in days)


def _days_from_db(value: Optional[str]) -> tuple[Weekday, ...]:
    if not value:
        return ()
    return tuple(Weekday(v) for v in value.split(",") if v)


def _to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["student_id"]),
        name=r["name"],
        hourly_rate=Decimal(r["hourly_rate"]),
        scheduled_days=_days_from_db(r.get("scheduled_days")),
        start_time=format_hhmm(r.get("start_time")),
        end_time=format_hhmm(r.get("end_time")),
        image_url=r.get("image_url"),
        attendance={day: bool(r[day.column]) for day in Weekday},
        paid_amount=Decimal(r["paid_amount"]),
        outstanding_balance=Decimal(r["outstanding_balance"]),
        total_collected=Decimal(r["total_collected"]),
        cycle_anchor=r["cycle_anchor"],
        created_at=r.get("created_at"),
        version=int(r["version"]),
    )


def _ledger_params(student: Student) -> tuple:
    flags = tuple(int(student.attended(day)) for day in Weekday)
    return flags + (
        student.paid_amount,
        student.outstanding_balance,
        student.total_collected,
        student.cycle_anchor,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY name ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def create(self, student: Student) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO students(
                    student_id, name, hourly_rate, scheduled_days, start_time, end_time, image_url,
                    {", ".join(_FLAG_COLUMNS)},
                    paid_amount, outstanding_balance, total_collected, cycle_anchor, created_at, version
                )
                VALUES({", ".join(["%s"] * (len(_FLAG_COLUMNS) + 13))})
                """,
                (
                    student.student_id,
                    student.name,
                    student.hourly_rate,
                    _days_to_db(student.scheduled_days),
                    student.start_time,
                    student.end_time,
                    student.image_url,
                )
                + _ledger_params(student)
                + (student.created_at, student.version),
            )
        return student

    def update_profile(self, student_id: str, profile: StudentProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, hourly_rate=%s, scheduled_days=%s, start_time=%s, end_time=%s, image_url=%s,
                    version=version+1
                WHERE student_id=%s
                """,
                (
                    profile.name,
                    profile.hourly_rate,
                    _days_to_db(profile.scheduled_days),
                    profile.start_time,
                    profile.end_time,
                    profile.image_url,
                    student_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0

    def save_ledger(self, student: Student, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._update_ledger(cur, student, expected_version)

    def save_payment(self, student: Student, payment: PaymentRecord, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._update_ledger(cur, student, expected_version):
                return False
            insert_payment(cur, payment)
            return True

    @staticmethod
    def _update_ledger(cur, student: Student, expected_version: int) -> bool:
        # version=version+1 always changes the row, so rowcount is 0 only on a version mismatch.
        cur.execute(
            f"""
            UPDATE students
            SET {_LEDGER_SET}, paid_amount=%s, outstanding_balance=%s, total_collected=%s, cycle_anchor=%s,
                version=version+1
            WHERE student_id=%s AND version=%s
            """,
            _ledger_params(student) + (student.student_id, int(expected_version)),
        )
        return cur.rowcount == 1
