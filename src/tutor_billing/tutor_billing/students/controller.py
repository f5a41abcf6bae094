from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_view, json_body, money
from ..container import Container
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from .model import Student
from .service import build_profile


def student_to_json(container: Container, s: Student) -> dict:
    billing = container.billing_service
    return {
        "id": s.student_id,
        "name": s.name,
        "hourly_rate": money(s.hourly_rate),
        "scheduled_days": [d.value for d in s.scheduled_days],
        "start_time": s.start_time,
        "end_time": s.end_time,
        "image_url": s.image_url,
        "attendance": {d.value: s.attended(d) for d in Weekday},
        "paid_amount": money(s.paid_amount),
        "outstanding_balance": money(s.outstanding_balance),
        "total_collected": money(s.total_collected),
        "cycle_anchor": s.cycle_anchor.isoformat(),
        "cycle_cost": money(billing.cycle_cost(s)),
        "due": money(billing.due_amount(s)),
    }


def _profile_from(data: dict):
    days = data.get("scheduled_days") or []
    if not isinstance(days, list):
        raise ValidationError("scheduled_days must be a list of weekday names")
    return build_profile(
        name=data.get("name", ""),
        hourly_rate=data.get("hourly_rate", 0),
        scheduled_days=days,
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
        image_url=data.get("image_url"),
    )


def register(app: Flask, container: Container) -> None:
    students = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @api_view
    def students_list():
        items = students.list_students(
            search=request.args.get("search"),
            day=request.args.get("day") or None,
            min_rate=request.args.get("min_rate"),
        )
        return jsonify([student_to_json(container, s) for s in items])

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @api_view
    def students_create():
        created = students.create_student(_profile_from(json_body()))
        return jsonify(student_to_json(container, created)), 201

    @app.route("/api/students/today", methods=["GET"], endpoint="students_today")
    @api_view
    def students_today():
        return jsonify([student_to_json(container, s) for s in students.todays_classes()])

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="students_get")
    @api_view
    def students_get(student_id: str):
        return jsonify(student_to_json(container, students.get_student(student_id)))

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    @api_view
    def students_update(student_id: str):
        updated = students.update_profile(student_id, _profile_from(json_body()))
        return jsonify(student_to_json(container, updated))

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @api_view
    def students_delete(student_id: str):
        students.delete_student(student_id)
        return jsonify({"success": True})

    @app.route("/api/students/<student_id>/attendance", methods=["PUT"], endpoint="students_attendance")
    @api_view
    def students_attendance(student_id: str):
        data = json_body()
        if "attendance" in data:
            updates = data["attendance"]
            if not isinstance(updates, dict):
                raise ValidationError("attendance must map weekday names to booleans")
        else:
            updates = {data.get("day"): data.get("attended")}

        for value in updates.values():
            if not isinstance(value, bool):
                raise ValidationError("attended must be true or false")

        updated = container.billing_service.set_attendance_bulk(student_id, updates)
        return jsonify(student_to_json(container, updated))
