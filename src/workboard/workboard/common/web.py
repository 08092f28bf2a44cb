from __future__ import annotations

from functools import wraps
from typing import Any, Dict

from flask import jsonify, request, session

from ..auth.service import AuthGate, SessionContext
from ..core.enums import ErrorKind
from ..core.result import Result

SESSION_KEY = "admin_session"

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_ID: 409,
    ErrorKind.PARTIAL_CASCADE: 500,
    ErrorKind.STORE_UNAVAILABLE: 503,
}


def current_session() -> SessionContext | None:
    return SessionContext.from_session(session.get(SESSION_KEY))


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def result_response(result: Result, *, success_status: int = 200):
    body = result.to_dict()
    data = result.data
    if data is not None and hasattr(data, "to_dict"):
        body["data"] = data.to_dict()
    if result.success:
        return jsonify(body), success_status
    return jsonify(body), STATUS_BY_KIND.get(result.error, 400)


def not_found(message: str):
    return result_response(Result.fail(ErrorKind.NOT_FOUND, message))


def login_required(gate: AuthGate):
    """Async view decorator: 401 unless the session carries a logged-in admin."""

    def decorator(view):
        @wraps(view)
        async def wrapper(*args, **kwargs):
            if not gate.require_auth(current_session()):
                return result_response(Result.fail(ErrorKind.UNAUTHENTICATED, "Please log in to continue"))
            return await view(*args, **kwargs)

        return wrapper

    return decorator
