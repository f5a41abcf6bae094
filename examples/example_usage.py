"""Example: drive the billing services directly (no Flask), on the in-memory store."""

from datetime import datetime

from src.tutor_billing.tutor_billing.container import build_container
from src.tutor_billing.tutor_billing.students.model import StudentProfile


def main():
    container = build_container(storage_backend="memory")
    monday = datetime(2024, 1, 8, 15, 0)

    student = container.student_service.create_student(
        StudentProfile(name="Alice Johnson", hourly_rate=150, scheduled_days=("Monday", "Wednesday")),
        now=monday,
    )
    container.billing_service.set_attendance(student.student_id, "Monday", True, now=monday)
    container.billing_service.apply_payment(student.student_id, 100, now=monday)

    # Next Saturday starts a new cycle: the unpaid 50 moves to the outstanding balance.
    later = container.student_service.get_student(student.student_id, now=datetime(2024, 1, 13, 9, 0))
    print(later.outstanding_balance, container.billing_service.due_amount(later))


if __name__ == "__main__":
    main()
