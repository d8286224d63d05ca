from __future__ import annotations

from typing import Any, Dict, List

from ..auth.guard import require_admin, require_self_or_admin
from ..auth.model import AuthContext
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..counters.service import SequentialIdGenerator
from ..employees.repository import EmployeeRepository
from ..records.model import AUDIT_FIELDS, Record
from .repository import EMBEDDED_FIELDS, EmploymentRepository

_NOT_WRITABLE = ("id", "version") + AUDIT_FIELDS + EMBEDDED_FIELDS


class EmploymentService:
    """Use case: employment records (admin). Attendance and leaves have their own services."""

    def __init__(self, employments: EmploymentRepository, employees: EmployeeRepository, ids: SequentialIdGenerator):
        self._employments = employments
        self._employees = employees
        self._ids = ids

    def create_employment(self, ctx: AuthContext, data: Dict[str, Any], *, assign_employment_id: bool = False) -> Record:
        require_admin(ctx)
        payload = {k: v for k, v in data.items() if k not in _NOT_WRITABLE}

        employee_id = payload.get("employeeId")
        if not employee_id:
            raise ValidationError("employeeId is required")
        if not self._employees.get(employee_id):
            raise NotFoundError("Employee not found")
        if self._employments.get_for_employee(employee_id):
            raise ConflictError("This employee already has an employment record")

        if payload.get("employmentId"):
            if self._employments.find_by("employmentId", payload["employmentId"]):
                raise ConflictError(f"Employment ID {payload['employmentId']} is already in use")
        elif assign_employment_id:
            payload["employmentId"] = self._ids.reserve_unused_id(
                "employment",
                lambda code: bool(self._employments.find_by("employmentId", code)),
            )

        payload.update(version=1, attendance=[], leaves=[])
        return self._employments.create(ctx, payload)

    def get_employment(self, ctx: AuthContext, employment_id: str) -> Record:
        employment = self._employments.require(employment_id)
        require_self_or_admin(ctx, employment.get("employeeId", ""))
        return employment

    def get_employment_for_employee(self, ctx: AuthContext, employee_id: str) -> Record:
        require_self_or_admin(ctx, employee_id)
        employment = self._employments.get_for_employee(employee_id)
        if not employment:
            raise NotFoundError("No employment record found for this employee.")
        return employment

    def list_employments(self, ctx: AuthContext) -> List[Record]:
        require_admin(ctx)
        return self._employments.list()

    def update_employment(self, ctx: AuthContext, employment_id: str, data: Dict[str, Any]) -> Record:
        """Merge top-level fields; embedded arrays and the owning employee are left alone."""
        require_admin(ctx)
        self._employments.require(employment_id)
        payload = {k: v for k, v in data.items() if k not in _NOT_WRITABLE and k != "employeeId"}
        return self._employments.update(ctx, employment_id, payload)

    def delete_employment(self, ctx: AuthContext, employment_id: str) -> None:
        require_admin(ctx)
        self._employments.require(employment_id)
        self._employments.delete(employment_id)
