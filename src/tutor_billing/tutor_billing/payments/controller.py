from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_view, json_body, money
from ..container import Container
from .model import PaymentRecord, PaymentView


def payment_to_json(p: PaymentRecord | PaymentView) -> dict:
    data = {
        "id": p.payment_id,
        "student_id": p.student_id,
        "amount": money(p.amount),
        "date": p.paid_at.isoformat(),
    }
    if isinstance(p, PaymentView):
        data["student_name"] = p.student_name
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/<student_id>/payments", methods=["POST"], endpoint="payments_create")
    @api_view
    def payments_create(student_id: str):
        data = json_body()
        record = container.billing_service.apply_payment(student_id, data.get("amount"))
        return jsonify(payment_to_json(record)), 201

    @app.route("/api/students/<student_id>/payments", methods=["GET"], endpoint="payments_for_student")
    @api_view
    def payments_for_student(student_id: str):
        student = container.student_service.get_student(student_id)
        return jsonify([payment_to_json(p) for p in container.payments_repo.list_for_student(student.student_id)])

    @app.route("/api/payments", methods=["GET"], endpoint="payments_list")
    @api_view
    def payments_list():
        return jsonify([payment_to_json(p) for p in container.report_service.list_payments()])
