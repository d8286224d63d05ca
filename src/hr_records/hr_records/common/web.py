from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import g, jsonify, request, session

from ..auth.model import AuthContext
from ..core.exceptions import AuthenticationError, ValidationError

# Flask session keys. The cached profiles are display copies; authority is always
# re-checked against the store on every request.
ADMIN_SESSION_KEY = "admin_session_id"
ADMIN_PROFILE_KEY = "admin"
EMPLOYEE_ID_KEY = "employee_id"
EMPLOYEE_PROFILE_KEY = "employee"


def employee_profile(record: Dict[str, Any]) -> Dict[str, Any]:
    """The few fields kept in the cookie; the full record stays in the store."""
    return {
        "id": record.get("id"),
        "employeeId": record.get("employeeId"),
        "name": record.get("name"),
        "phone": record.get("phone"),
    }


def clear_admin_session() -> None:
    session.pop(ADMIN_SESSION_KEY, None)
    session.pop(ADMIN_PROFILE_KEY, None)


def clear_employee_session() -> None:
    session.pop(EMPLOYEE_ID_KEY, None)
    session.pop(EMPLOYEE_PROFILE_KEY, None)


def resolve_context(container) -> Optional[AuthContext]:
    """Administrator session wins over an employee login held in the same cookie."""
    manager = container.session_manager

    session_id = session.get(ADMIN_SESSION_KEY)
    if session_id:
        try:
            return manager.admin_context(session_id)
        except AuthenticationError:
            clear_admin_session()

    employee_id = session.get(EMPLOYEE_ID_KEY)
    if employee_id:
        try:
            return manager.employee_context(employee_id)
        except AuthenticationError:
            clear_employee_session()
    return None


def login_required(container):
    """Resolve the caller once and pass it to the view as ``ctx``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            ctx = resolve_context(container)
            if ctx is None:
                raise AuthenticationError("Please log in to continue")
            g.auth_context = ctx
            return view(ctx, *args, **kwargs)

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def expected_version(data: Dict[str, Any]) -> Optional[int]:
    raw = data.get("expectedVersion", request.args.get("expectedVersion"))
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("expectedVersion must be a number")


def ok(payload: Any = None, status: int = 200):
    return jsonify({"ok": True, "data": payload}), status
