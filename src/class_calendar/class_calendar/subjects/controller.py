from __future__ import annotations

from flask import Flask, g, request

from ..common.http import auth_decorators, json_body, ok
from ..common.validators import parse_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required, auth_optional = auth_decorators(container.tokens)
    service = container.subject_service

    @app.route("/api/subjects", methods=["GET"], endpoint="list_subjects")
    @auth_optional
    def list_subjects():
        subjects = service.list_subjects(g.caller, active=parse_bool(request.args.get("active")))
        return ok([s.to_dict() for s in subjects], count=len(subjects))

    @app.route("/api/subjects/schedule/week", methods=["GET"], endpoint="week_schedule")
    @auth_optional
    def week_schedule():
        return ok(service.week_schedule(g.caller))

    @app.route("/api/subjects/day/<day>", methods=["GET"], endpoint="day_schedule")
    @auth_optional
    def day_schedule(day: str):
        return ok(service.day_schedule(g.caller, day))

    @app.route("/api/subjects/<int:subject_id>", methods=["GET"], endpoint="get_subject")
    @auth_optional
    def get_subject(subject_id: int):
        return ok(service.get(g.caller, subject_id).to_dict())

    @app.route("/api/subjects", methods=["POST"], endpoint="create_subject")
    @auth_required
    def create_subject():
        return ok(service.create(g.caller, json_body()).to_dict(), status=201)

    @app.route("/api/subjects/<int:subject_id>", methods=["PUT"], endpoint="update_subject")
    @auth_required
    def update_subject(subject_id: int):
        return ok(service.update(g.caller, subject_id, json_body()).to_dict())

    @app.route("/api/subjects/<int:subject_id>", methods=["DELETE"], endpoint="delete_subject")
    @auth_required
    def delete_subject(subject_id: int):
        service.delete(g.caller, subject_id)
        return ok(None, message="Subject deleted")

    @app.route("/api/subjects/<int:subject_id>/toggle-active", methods=["PATCH"], endpoint="toggle_subject")
    @auth_required
    def toggle_subject(subject_id: int):
        return ok(service.toggle_active(g.caller, subject_id).to_dict())
