from __future__ import annotations

from flask import Flask

from ..common.web import expected_version, json_body, login_required, ok, query_int
from ..container import Container
from .leave_service import LeaveView


def _leave_payload(view: LeaveView) -> dict:
    return {
        **view.leave.to_doc(),
        "employmentId": view.employment_id,
        "employeeId": view.employee_id,
        "decidedByName": view.decided_by_name,
    }


def register(app: Flask, container: Container) -> None:
    employments = container.employment_service
    attendance = container.attendance_service
    leaves = container.leave_service
    auth = login_required(container)

    # -------- employment records (admin) --------
    @app.route("/api/employments", methods=["GET"], endpoint="list_employments")
    @auth
    def list_employments(ctx):
        return ok(employments.list_employments(ctx))

    @app.route("/api/employments", methods=["POST"], endpoint="create_employment")
    @auth
    def create_employment(ctx):
        data = json_body()
        assign = bool(data.pop("assignEmploymentId", False))
        return ok(employments.create_employment(ctx, data, assign_employment_id=assign), 201)

    @app.route("/api/employments/<employment_id>", methods=["GET"], endpoint="get_employment")
    @auth
    def get_employment(ctx, employment_id: str):
        return ok(employments.get_employment(ctx, employment_id))

    @app.route("/api/employments/<employment_id>", methods=["PUT", "PATCH"], endpoint="update_employment")
    @auth
    def update_employment(ctx, employment_id: str):
        return ok(employments.update_employment(ctx, employment_id, json_body()))

    @app.route("/api/employments/<employment_id>", methods=["DELETE"], endpoint="delete_employment")
    @auth
    def delete_employment(ctx, employment_id: str):
        employments.delete_employment(ctx, employment_id)
        return ok({"deleted": employment_id})

    @app.route("/api/employees/<employee_id>/employment", methods=["GET"], endpoint="employment_for_employee")
    @auth
    def employment_for_employee(ctx, employee_id: str):
        return ok(employments.get_employment_for_employee(ctx, employee_id))

    # -------- attendance --------
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    @auth
    def check_in(ctx):
        return ok(attendance.check_in(ctx, ctx.principal_id).to_doc(), 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    @auth
    def check_out(ctx):
        return ok(attendance.check_out(ctx, ctx.principal_id).to_doc())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @auth
    def attendance_today(ctx):
        entry = attendance.today(ctx, ctx.principal_id)
        return ok(entry.to_doc() if entry else None)

    @app.route("/api/employees/<employee_id>/attendance", methods=["GET"], endpoint="attendance_history")
    @auth
    def attendance_history(ctx, employee_id: str):
        entries = attendance.history(ctx, employee_id, month=query_int("month"), year=query_int("year"))
        return ok([e.to_doc() for e in entries])

    # -------- leaves (employee) --------
    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @auth
    def apply_leave(ctx):
        data = json_body()
        leave = leaves.apply(
            ctx,
            ctx.principal_id,
            leave_type=data.get("type", ""),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason", ""),
        )
        return ok(leave.to_doc(), 201)

    @app.route("/api/leaves/<leave_id>", methods=["PUT", "PATCH"], endpoint="edit_leave")
    @auth
    def edit_leave(ctx, leave_id: str):
        data = json_body()
        leave = leaves.edit(
            ctx,
            ctx.principal_id,
            leave_id,
            leave_type=data.get("type"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
            expected_version=expected_version(data),
        )
        return ok(leave.to_doc())

    @app.route("/api/leaves/<leave_id>", methods=["DELETE"], endpoint="cancel_leave")
    @auth
    def cancel_leave(ctx, leave_id: str):
        leaves.cancel(ctx, ctx.principal_id, leave_id, expected_version=expected_version({}))
        return ok({"cancelled": leave_id})

    @app.route("/api/employees/<employee_id>/leaves", methods=["GET"], endpoint="list_leaves")
    @auth
    def list_leaves(ctx, employee_id: str):
        views = leaves.list_for_employee(ctx, employee_id, year=query_int("year"))
        return ok([_leave_payload(v) for v in views])

    # -------- leaves (admin) --------
    @app.route("/api/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @auth
    def pending_leaves(ctx):
        return ok([_leave_payload(v) for v in leaves.list_pending(ctx)])

    @app.route(
        "/api/employments/<employment_id>/leaves/<leave_id>/decision",
        methods=["POST"],
        endpoint="decide_leave",
    )
    @auth
    def decide_leave(ctx, employment_id: str, leave_id: str):
        data = json_body()
        leave = leaves.decide(
            ctx,
            employment_id,
            leave_id,
            data.get("status", ""),
            expected_version=expected_version(data),
        )
        return ok(leave.to_doc())
