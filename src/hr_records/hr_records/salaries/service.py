from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from ..auth.guard import require_admin, require_self_or_admin
from ..auth.model import AuthContext
from ..common.validators import require_month, require_year
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..counters.service import SequentialIdGenerator
from ..employees.repository import EmployeeRepository
from ..records.model import AUDIT_FIELDS, Record
from .repository import SalaryRepository

_NOT_WRITABLE = ("id",) + AUDIT_FIELDS


def _amount(value: Any, label: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number")
    if not math.isfinite(amount):
        raise ValidationError(f"{label} must be a number")
    return amount


def _check_lines(lines: Any, label: str) -> None:
    if lines is None:
        return
    if not isinstance(lines, list) or not all(isinstance(line, dict) for line in lines):
        raise ValidationError(f"{label} must be a list of {{name, amount}} entries")
    for line in lines:
        if line.get("amount") is not None:
            _amount(line["amount"], f"{label} amount")


def validate_amounts(payload: Dict[str, Any]) -> None:
    """Reject salary amounts that cannot be added up."""
    for key, label in (("basicSalary", "Basic salary"), ("netSalary", "Net salary")):
        if payload.get(key) is not None:
            _amount(payload[key], label)
    _check_lines(payload.get("allowances"), "Allowances")
    _check_lines(payload.get("deductions"), "Deductions")


def _total(lines: Iterable[Dict[str, Any]]) -> float:
    return sum(float(line.get("amount") or 0) for line in lines or [])


def compute_net_salary(payload: Dict[str, Any]) -> Optional[float]:
    """basic + allowances - deductions, when a basic amount is known."""
    if payload.get("basicSalary") is None:
        return None
    net = float(payload["basicSalary"]) + _total(payload.get("allowances")) - _total(payload.get("deductions"))
    return round(net, 2)


class SalaryService:
    """Use case: salary records, at most one per (employee, month, year)."""

    def __init__(self, salaries: SalaryRepository, employees: EmployeeRepository, ids: SequentialIdGenerator):
        self._salaries = salaries
        self._employees = employees
        self._ids = ids

    def _ensure_period_free(self, employee_id: str, month: int, year: int, *, exclude_id: Optional[str] = None) -> None:
        for salary in self._salaries.list_for_employee(employee_id):
            if exclude_id and salary["id"] == exclude_id:
                continue
            if int(salary.get("month", 0)) == month and int(salary.get("year", 0)) == year:
                raise ConflictError(f"A salary for {month:02d}/{year} already exists for this employee")

    def create_salary(self, ctx: AuthContext, data: Dict[str, Any], *, assign_salary_id: bool = False) -> Record:
        require_admin(ctx)
        payload = {k: v for k, v in data.items() if k not in _NOT_WRITABLE}

        employee_id = payload.get("employeeId")
        if not employee_id:
            raise ValidationError("employeeId is required")
        if not self._employees.get(employee_id):
            raise NotFoundError("Employee not found")

        payload["month"] = require_month(payload.get("month"))
        payload["year"] = require_year(payload.get("year"))
        self._ensure_period_free(employee_id, payload["month"], payload["year"])
        validate_amounts(payload)

        if payload.get("netSalary") is None:
            payload["netSalary"] = compute_net_salary(payload)

        if payload.get("salaryId"):
            if self._salaries.find_by("salaryId", payload["salaryId"]):
                raise ConflictError(f"Salary ID {payload['salaryId']} is already in use")
        elif assign_salary_id:
            payload["salaryId"] = self._ids.reserve_unused_id(
                "salary",
                lambda code: bool(self._salaries.find_by("salaryId", code)),
            )

        return self._salaries.create(ctx, payload)

    def update_salary(self, ctx: AuthContext, salary_id: str, data: Dict[str, Any]) -> Record:
        require_admin(ctx)
        existing = self._salaries.require(salary_id)
        payload = {k: v for k, v in data.items() if k not in _NOT_WRITABLE}

        employee_id = payload.get("employeeId") or existing["employeeId"]
        if employee_id != existing["employeeId"] and not self._employees.get(employee_id):
            raise NotFoundError("Employee not found")

        month = require_month(payload.get("month", existing.get("month")))
        year = require_year(payload.get("year", existing.get("year")))
        self._ensure_period_free(employee_id, month, year, exclude_id=salary_id)
        payload.update(employeeId=employee_id, month=month, year=year)
        validate_amounts(payload)

        amounts_changed = any(k in payload for k in ("basicSalary", "allowances", "deductions"))
        if amounts_changed and payload.get("netSalary") is None:
            payload["netSalary"] = compute_net_salary({**existing, **payload})

        return self._salaries.update(ctx, salary_id, payload)

    def get_salary(self, ctx: AuthContext, salary_id: str) -> Record:
        salary = self._salaries.require(salary_id)
        require_self_or_admin(ctx, salary.get("employeeId", ""))
        return salary

    def list_salaries_for_employee(self, ctx: AuthContext, employee_id: str) -> List[Record]:
        require_self_or_admin(ctx, employee_id)
        salaries = self._salaries.list_for_employee(employee_id)
        return sorted(salaries, key=lambda s: (int(s.get("year", 0)), int(s.get("month", 0))), reverse=True)

    def delete_salary(self, ctx: AuthContext, salary_id: str) -> None:
        require_admin(ctx)
        self._salaries.require(salary_id)
        self._salaries.delete(salary_id)
