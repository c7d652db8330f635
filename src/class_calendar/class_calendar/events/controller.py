from __future__ import annotations

from flask import Flask, g, request

from ..common.http import auth_decorators, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required, auth_optional = auth_decorators(container.tokens)
    service = container.event_service

    @app.route("/api/events", methods=["GET"], endpoint="list_events")
    @auth_optional
    def list_events():
        events = service.list_events(
            g.caller,
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
            event_type=request.args.get("type"),
        )
        return ok([e.to_dict() for e in events], count=len(events))

    @app.route("/api/events/month/<int:year>/<int:month>", methods=["GET"], endpoint="events_by_month")
    @auth_optional
    def events_by_month(year: int, month: int):
        events = service.events_by_month(g.caller, year, month)
        return ok([e.to_dict() for e in events], count=len(events))

    @app.route("/api/events/<int:event_id>", methods=["GET"], endpoint="get_event")
    @auth_optional
    def get_event(event_id: int):
        return ok(service.get(g.caller, event_id).to_dict())

    @app.route("/api/events", methods=["POST"], endpoint="create_event")
    @auth_required
    def create_event():
        return ok(service.create(g.caller, json_body()).to_dict(), status=201)

    @app.route("/api/events/<int:event_id>", methods=["PUT"], endpoint="update_event")
    @auth_required
    def update_event(event_id: int):
        return ok(service.update(g.caller, event_id, json_body()).to_dict())

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="delete_event")
    @auth_required
    def delete_event(event_id: int):
        service.delete(g.caller, event_id)
        return ok(None, message="Event deleted")

    @app.route("/api/events/<int:event_id>/toggle-complete", methods=["PATCH"], endpoint="toggle_event")
    @auth_required
    def toggle_event(event_id: int):
        return ok(service.toggle_complete(g.caller, event_id).to_dict())
