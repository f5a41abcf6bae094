from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_view, money
from ..container import Container
from ..core.enums import DateRangePreset
from ..core.exceptions import ValidationError
from ..payments.controller import payment_to_json
from ..students.controller import student_to_json


def _date_arg(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def _int_arg(name: str):
    value = request.args.get(name)
    if not value:
        return None
    if not value.isdigit():
        raise ValidationError(f"{name} must be a number")
    return int(value)


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/financial", methods=["GET"], endpoint="reports_financial")
    @api_view
    def reports_financial():
        summary = reports.build_financial_summary(
            preset=request.args.get("range") or DateRangePreset.CURRENT_MONTH.value,
            start=_date_arg("start"),
            end=_date_arg("end"),
        )
        return jsonify(
            {
                "range_start": summary.range_start.isoformat() if summary.range_start else None,
                "range_end": summary.range_end.isoformat() if summary.range_end else None,
                "collected_in_range": money(summary.collected_in_range),
                "payments": [payment_to_json(p) for p in summary.payments],
                "total_due": money(summary.total_due),
                "students_with_due": [
                    {"student": student_to_json(container, row.student), "due": money(row.due)}
                    for row in summary.students_with_due
                ],
                "lifetime_collected": money(summary.lifetime_collected),
            }
        )

    @app.route("/api/reports/students/<student_id>", methods=["GET"], endpoint="reports_student")
    @api_view
    def reports_student(student_id: str):
        st = reports.build_student_statement(student_id, year=_int_arg("year"), month=_int_arg("month"))
        return jsonify(
            {
                "student": student_to_json(container, st.student),
                "cycle_cost": money(st.cycle_cost),
                "cycle_remaining": money(st.cycle_remaining),
                "outstanding_balance": money(st.outstanding_balance),
                "total_due": money(st.total_due),
                "year": st.year,
                "month": st.month,
                "scheduled_dates": [d.isoformat() for d in st.scheduled_dates],
                "projected_revenue": money(st.projected_revenue),
                "payments": [payment_to_json(p) for p in st.payments],
            }
        )
