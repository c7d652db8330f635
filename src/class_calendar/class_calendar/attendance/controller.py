from __future__ import annotations

from flask import Flask, g, request

from ..common.http import auth_decorators, json_body, ok
from ..common.validators import parse_bool
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    auth_required, _ = auth_decorators(container.tokens)
    service = container.attendance_service

    def _history(subject_id=None):
        records = service.history(
            g.caller,
            subject_id=subject_id,
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
            is_present=parse_bool(request.args.get("is_present")),
        )
        return ok([r.to_dict() for r in records], count=len(records))

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @auth_required
    def record_attendance():
        data = json_body()
        outcome = service.record(
            g.caller,
            subject_id=data.get("subject_id"),
            class_date=data.get("date"),
            period=data.get("period"),
            is_present=data.get("is_present", False),
            notes=data.get("notes"),
        )
        message = "Attendance recorded" if outcome.created else "Attendance updated"
        return ok(outcome.record.to_dict(), status=201 if outcome.created else 200, message=message)

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="bulk_record_attendance")
    @auth_required
    def bulk_record_attendance():
        records = json_body().get("records")
        if not isinstance(records, list):
            raise ValidationError("Provide a non-empty list of records")
        return ok(service.bulk_record(g.caller, records).to_dict())

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_all_stats")
    @auth_required
    def attendance_all_stats():
        stats = service.all_stats(g.caller)
        return ok([s.to_dict() for s in stats], count=len(stats))

    @app.route("/api/attendance/stats/<int:subject_id>", methods=["GET"], endpoint="attendance_stats")
    @auth_required
    def attendance_stats(subject_id: int):
        return ok(service.stats(g.caller, subject_id).to_dict())

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @auth_required
    def attendance_summary():
        return ok(service.summary(g.caller))

    @app.route("/api/attendance/at-risk", methods=["GET"], endpoint="attendance_at_risk")
    @auth_required
    def attendance_at_risk():
        stats = service.at_risk(g.caller)
        return ok([s.to_dict() for s in stats], count=len(stats))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @auth_required
    def attendance_history():
        return _history()

    @app.route("/api/attendance/history/<int:subject_id>", methods=["GET"], endpoint="attendance_subject_history")
    @auth_required
    def attendance_subject_history(subject_id: int):
        return _history(subject_id)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @auth_required
    def update_attendance(attendance_id: int):
        data = json_body()
        changes = {"notes": data["notes"]} if "notes" in data else {}
        record = service.update(g.caller, attendance_id, is_present=data.get("is_present"), **changes)
        return ok(record.to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @auth_required
    def delete_attendance(attendance_id: int):
        service.delete(g.caller, attendance_id)
        return ok(None, message="Record deleted")
