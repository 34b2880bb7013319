from __future__ import annotations

from flask import Flask, session

from ..common.web import current_actor, login_required, ok, parse_body
from ..container import Container
from .schemas import LoginIn


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = parse_body(LoginIn)
        actor = container.auth_service.authenticate(body.username, body.password)

        session.clear()
        session["user_id"] = actor.user_id
        session["employee_id"] = actor.employee_id
        session["role"] = actor.role.value
        return ok({"user_id": actor.user_id, "employee_id": actor.employee_id, "role": actor.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        actor = current_actor()
        return ok({"user_id": actor.user_id, "employee_id": actor.employee_id, "role": actor.role.value})
