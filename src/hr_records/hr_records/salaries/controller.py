from __future__ import annotations

from flask import Flask

from ..common.web import json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.salary_service
    auth = login_required(container)

    @app.route("/api/salaries", methods=["POST"], endpoint="create_salary")
    @auth
    def create_salary(ctx):
        data = json_body()
        assign = bool(data.pop("assignSalaryId", False))
        return ok(service.create_salary(ctx, data, assign_salary_id=assign), 201)

    @app.route("/api/salaries/<salary_id>", methods=["GET"], endpoint="get_salary")
    @auth
    def get_salary(ctx, salary_id: str):
        return ok(service.get_salary(ctx, salary_id))

    @app.route("/api/salaries/<salary_id>", methods=["PUT", "PATCH"], endpoint="update_salary")
    @auth
    def update_salary(ctx, salary_id: str):
        return ok(service.update_salary(ctx, salary_id, json_body()))

    @app.route("/api/salaries/<salary_id>", methods=["DELETE"], endpoint="delete_salary")
    @auth
    def delete_salary(ctx, salary_id: str):
        service.delete_salary(ctx, salary_id)
        return ok({"deleted": salary_id})

    @app.route("/api/employees/<employee_id>/salaries", methods=["GET"], endpoint="list_salaries")
    @auth
    def list_salaries(ctx, employee_id: str):
        return ok(service.list_salaries_for_employee(ctx, employee_id))
