from __future__ import annotations

from flask import Flask, session

from ..common.datetime_utils import iso
from ..common.web import (
    ADMIN_PROFILE_KEY,
    ADMIN_SESSION_KEY,
    EMPLOYEE_ID_KEY,
    EMPLOYEE_PROFILE_KEY,
    clear_admin_session,
    clear_employee_session,
    employee_profile,
    json_body,
    login_required,
    ok,
    resolve_context,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    manager = container.session_manager

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        login = manager.admin_login(data.get("phone", ""), data.get("password", ""))

        clear_employee_session()
        profile = {
            "id": login.admin.principal_id,
            "name": login.admin.name,
            "mobile": login.admin.phone,
            "isAdmin": True,
            "expiresAt": iso(login.context.expires_at),
        }
        session[ADMIN_SESSION_KEY] = login.session_id
        session[ADMIN_PROFILE_KEY] = profile
        return ok({"sessionId": login.session_id, "admin": profile})

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        ended = manager.admin_logout(session.get(ADMIN_SESSION_KEY))
        clear_admin_session()
        return ok({"ended": ended})

    @app.route("/api/login", methods=["POST"], endpoint="employee_login")
    def employee_login():
        data = json_body()
        login = manager.employee_login(data.get("phone", ""), data.get("password", ""))

        clear_admin_session()
        session[EMPLOYEE_ID_KEY] = login.context.principal_id
        session[EMPLOYEE_PROFILE_KEY] = employee_profile(login.record)
        return ok({"employee": login.record})

    @app.route("/api/logout", methods=["POST"], endpoint="employee_logout")
    def employee_logout():
        clear_employee_session()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="whoami")
    @login_required(container)
    def whoami(ctx):
        return ok(
            {
                "id": ctx.principal_id,
                "kind": ctx.kind.value,
                "name": ctx.display_name,
                "expiresAt": iso(ctx.expires_at) if ctx.expires_at else None,
            }
        )

    @app.route("/api/session", methods=["GET"], endpoint="session_status")
    def session_status():
        ctx = resolve_context(container)
        return ok({"authenticated": ctx is not None, "kind": ctx.kind.value if ctx else None})
