from __future__ import annotations

from flask import Flask, request, session

from ..auth.guard import require_admin
from ..common.web import EMPLOYEE_PROFILE_KEY, employee_profile, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service
    auth = login_required(container)

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @auth
    def list_employees(ctx):
        return ok(service.list_employees(ctx))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @auth
    def create_employee(ctx):
        data = json_body()
        assign = bool(data.pop("assignEmployeeId", False))
        return ok(service.create_employee(ctx, data, assign_employee_id=assign), 201)

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @auth
    def get_employee(ctx, employee_id: str):
        return ok(service.get_employee(ctx, employee_id))

    @app.route("/api/employees/<employee_id>", methods=["PUT", "PATCH"], endpoint="update_employee")
    @auth
    def update_employee(ctx, employee_id: str):
        return ok(service.update_employee(ctx, employee_id, json_body()))

    @app.route("/api/employees/<employee_id>/status", methods=["POST"], endpoint="set_employee_status")
    @auth
    def set_employee_status(ctx, employee_id: str):
        data = json_body()
        return ok(service.set_employee_status(ctx, employee_id, active=bool(data.get("active", True))))

    @app.route("/api/employees/<employee_id>/resign", methods=["POST"], endpoint="resign_employee")
    @auth
    def resign_employee(ctx, employee_id: str):
        data = json_body()
        record = service.resign_employee(
            ctx,
            employee_id,
            resignation_date=data.get("resignationDate"),
            last_working_date=data.get("lastWorkingDate"),
        )
        return ok(record)

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @auth
    def delete_employee(ctx, employee_id: str):
        service.delete_employee(ctx, employee_id)
        return ok({"deleted": employee_id})

    @app.route("/api/employees/migrate", methods=["POST"], endpoint="migrate_employees")
    @auth
    def migrate_employees(ctx):
        return ok({"migrated": service.migrate_all(ctx)})

    @app.route("/api/profile", methods=["GET"], endpoint="my_profile")
    @auth
    def my_profile(ctx):
        return ok(service.get_employee(ctx, ctx.principal_id))

    @app.route("/api/profile", methods=["PUT", "PATCH"], endpoint="update_my_profile")
    @auth
    def update_my_profile(ctx):
        record = service.update_own_profile(ctx, ctx.principal_id, json_body())
        session[EMPLOYEE_PROFILE_KEY] = employee_profile(record)
        app.logger.info("Employee %s updated own profile from %s", ctx.principal_id, request.remote_addr)
        return ok(record)

    @app.route("/api/phone-owner", methods=["GET"], endpoint="phone_owner")
    @auth
    def phone_owner(ctx):
        # Admin tooling: who (if anyone) already owns a phone number.
        require_admin(ctx)
        owner = container.uniqueness.find_owner(request.args.get("phone", ""))
        if owner is None:
            return ok({"registered": False})
        return ok({"registered": True, "kind": owner.kind.value, "id": owner.principal_id, "name": owner.name})
