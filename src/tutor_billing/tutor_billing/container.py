from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .billing.calculator.factory import calculator_for
from .billing.service import BillingService
from .core.constants import DEFAULT_COST_POLICY
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .payments.memory_payment_repository import InMemoryPaymentRepository
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .reports.service import ReportService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    payments_repo: PaymentRepository

    billing_service: BillingService
    student_service: StudentService
    report_service: ReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    storage_backend: StorageBackend | str = StorageBackend.MYSQL,
    cost_policy: str = DEFAULT_COST_POLICY,
) -> Container:
    backend = StorageBackend(storage_backend)

    conn = None
    if backend == StorageBackend.MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql storage backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        students_repo = MySQLStudentRepository(conn)
        payments_repo = MySQLPaymentRepository(conn)
    else:
        payments_repo = InMemoryPaymentRepository()
        students_repo = InMemoryStudentRepository(payments_repo)

    billing_service = BillingService(students_repo, calculator=calculator_for(cost_policy))
    student_service = StudentService(students_repo, billing_service)
    report_service = ReportService(student_service, payments_repo, billing_service)

    return Container(
        conn=conn,
        students_repo=students_repo,
        payments_repo=payments_repo,
        billing_service=billing_service,
        student_service=student_service,
        report_service=report_service,
    )
