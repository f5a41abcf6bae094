from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import PaymentRecord
from .repository import PaymentRepository

_COLUMNS = "payment_id, student_id, amount, paid_at"


def insert_payment(cur, record: PaymentRecord) -> None:
    """Insert on an open cursor so callers can share a transaction."""

    cur.execute(
        f"INSERT INTO payments({_COLUMNS}) VALUES(%s,%s,%s,%s)",
        (record.payment_id, record.student_id, record.amount, record.paid_at),
    )


def _to_record(r: dict) -> PaymentRecord:
    return PaymentRecord(
        payment_id=str(r["payment_id"]),
        student_id=str(r["student_id"]),
        amount=Decimal(r["amount"]),
        paid_at=r["paid_at"],
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, record: PaymentRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            insert_payment(cur, record)

    def list_all(self) -> Sequence[PaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payments ORDER BY paid_at DESC")
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str) -> Sequence[PaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payments WHERE student_id=%s ORDER BY paid_at DESC",
                (student_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]
