from __future__ import annotations

from flask import Flask, g, request

from ..common.http import auth_decorators, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required, _ = auth_decorators(container.tokens)
    service = container.suggestion_service

    @app.route("/api/suggestions", methods=["POST"], endpoint="submit_suggestion")
    @auth_required
    def submit_suggestion():
        data = json_body()
        suggestion = service.submit(
            g.caller,
            kind=data.get("kind"),
            reason=data.get("reason"),
            event_id=data.get("event_id"),
            payload=data.get("payload"),
        )
        return ok(suggestion.to_dict(), status=201, message="Suggestion sent for review")

    @app.route("/api/suggestions/my-suggestions", methods=["GET"], endpoint="my_suggestions")
    @auth_required
    def my_suggestions():
        items = service.list_mine(g.caller, status=request.args.get("status"), kind=request.args.get("kind"))
        return ok([s.to_dict() for s in items], count=len(items))

    @app.route("/api/suggestions/pending", methods=["GET"], endpoint="pending_suggestions")
    @auth_required
    def pending_suggestions():
        items = service.list_pending(g.caller)
        return ok([s.to_dict() for s in items], count=len(items))

    @app.route("/api/suggestions/all", methods=["GET"], endpoint="all_suggestions")
    @auth_required
    def all_suggestions():
        listing = service.list_all(
            g.caller,
            status=request.args.get("status"),
            kind=request.args.get("kind"),
            user_id=request.args.get("user_id"),
        )
        body = listing.to_dict()
        return ok(body["data"], count=body["count"], stats=body["stats"])

    @app.route("/api/suggestions/<int:suggestion_id>/approve", methods=["POST"], endpoint="approve_suggestion")
    @auth_required
    def approve_suggestion(suggestion_id: int):
        outcome = service.approve(g.caller, suggestion_id, message=json_body().get("message"))
        return ok(outcome.to_dict(), message="Suggestion approved")

    @app.route("/api/suggestions/<int:suggestion_id>/reject", methods=["POST"], endpoint="reject_suggestion")
    @auth_required
    def reject_suggestion(suggestion_id: int):
        suggestion = service.reject(g.caller, suggestion_id, message=json_body().get("message"))
        return ok(suggestion.to_dict(), message="Suggestion rejected")

    @app.route("/api/suggestions/<int:suggestion_id>", methods=["GET"], endpoint="get_suggestion")
    @auth_required
    def get_suggestion(suggestion_id: int):
        return ok(service.get(g.caller, suggestion_id).to_dict())

    @app.route("/api/suggestions/<int:suggestion_id>", methods=["DELETE"], endpoint="delete_suggestion")
    @auth_required
    def delete_suggestion(suggestion_id: int):
        service.delete(g.caller, suggestion_id)
        return ok(None, message="Suggestion deleted")
