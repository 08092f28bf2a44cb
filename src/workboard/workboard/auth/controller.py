from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import SESSION_KEY, current_session, json_body, result_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    async def login():
        body = json_body()
        result = await container.auth_service.login(str(body.get("username", "")), str(body.get("password", "")))
        if result.success:
            session.clear()
            session.permanent = bool(body.get("remember"))
            session[SESSION_KEY] = result.data.to_session()
        return result_response(result)

    @app.route("/logout", methods=["POST"], endpoint="logout")
    async def logout():
        session.pop(SESSION_KEY, None)
        return jsonify({"success": True, "message": "Logged out"})

    @app.route("/session", methods=["GET"], endpoint="session_info")
    async def session_info():
        ctx = current_session()
        return jsonify(
            {
                "authenticated": container.auth_gate.is_authenticated(ctx),
                "username": ctx.username if ctx else None,
            }
        )
