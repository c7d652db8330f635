from __future__ import annotations

from flask import Flask, g

from ..common.http import auth_decorators, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required, _ = auth_decorators(container.tokens)
    service = container.auth_service

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        user = service.register(email=data.get("email"), name=data.get("name"))
        return ok(
            user.to_public_dict(),
            status=201,
            message="Registration received. Check your email to verify your account.",
        )

    @app.route("/api/auth/verify-email/<token>", methods=["GET"], endpoint="auth_verify_email")
    def auth_verify_email(token: str):
        return ok(service.verify_email(token).to_dict(), message="Email verified")

    @app.route("/api/auth/request-access", methods=["POST"], endpoint="auth_request_access")
    def auth_request_access():
        service.request_access(email=json_body().get("email"))
        return ok(None, message="Access code sent. Check your email.")

    @app.route("/api/auth/verify-otp", methods=["POST"], endpoint="auth_verify_otp")
    def auth_verify_otp():
        data = json_body()
        return ok(service.verify_otp(email=data.get("email"), otp=data.get("otp")).to_dict())

    @app.route("/api/auth/magic-login/<token>", methods=["GET"], endpoint="auth_magic_login")
    def auth_magic_login(token: str):
        return ok(service.magic_login(token).to_dict())

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required
    def auth_me():
        return ok(service.me(g.caller).to_public_dict())
