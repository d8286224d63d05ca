from __future__ import annotations

import pytest

from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from src.hr_records.hr_records.salaries.service import compute_net_salary


def _salary(employee_id, **overrides):
    data = {
        "employeeId": employee_id,
        "month": 1,
        "year": 2024,
        "basicSalary": 30000,
        "allowances": [{"name": "HRA", "amount": 5000}],
        "deductions": [{"name": "PF", "amount": 1800}],
    }
    data.update(overrides)
    return data


def test_net_salary_is_computed():
    assert compute_net_salary({"basicSalary": 1000, "allowances": [{"amount": 200}], "deductions": [{"amount": 50.5}]}) == 1149.5
    assert compute_net_salary({}) is None


def test_create_salary(container, admin_ctx, make_employee):
    employee = make_employee()

    salary = container.salary_service.create_salary(admin_ctx, _salary(employee["id"]), assign_salary_id=True)

    assert salary["netSalary"] == 33200
    assert salary["salaryId"] == "SAL001"


def test_one_salary_per_period(container, admin_ctx, make_employee):
    employee = make_employee()
    container.salary_service.create_salary(admin_ctx, _salary(employee["id"]))

    with pytest.raises(ConflictError):
        container.salary_service.create_salary(admin_ctx, _salary(employee["id"]))

    container.salary_service.create_salary(admin_ctx, _salary(employee["id"], month=2))


def test_update_excludes_itself_from_period_check(container, admin_ctx, make_employee):
    employee = make_employee()
    january = container.salary_service.create_salary(admin_ctx, _salary(employee["id"]))
    february = container.salary_service.create_salary(admin_ctx, _salary(employee["id"], month=2))

    updated = container.salary_service.update_salary(admin_ctx, january["id"], {"basicSalary": 40000})
    assert updated["netSalary"] == 43200

    with pytest.raises(ConflictError):
        container.salary_service.update_salary(admin_ctx, february["id"], {"month": 1})


@pytest.mark.parametrize("month", [0, 13, "abc"])
def test_month_must_be_valid(container, admin_ctx, make_employee, month):
    employee = make_employee()

    with pytest.raises(ValidationError):
        container.salary_service.create_salary(admin_ctx, _salary(employee["id"], month=month))


def test_salary_for_unknown_employee(container, admin_ctx):
    with pytest.raises(NotFoundError):
        container.salary_service.create_salary(admin_ctx, _salary("missing"))


def test_employee_reads_own_salaries_only(container, admin_ctx, make_employee, ctx_for):
    me = make_employee()
    other = make_employee()
    container.salary_service.create_salary(admin_ctx, _salary(me["id"]))
    container.salary_service.create_salary(admin_ctx, _salary(me["id"], month=3))
    theirs = container.salary_service.create_salary(admin_ctx, _salary(other["id"]))

    mine = container.salary_service.list_salaries_for_employee(ctx_for(me), me["id"])
    assert [s["month"] for s in mine] == [3, 1]

    with pytest.raises(AuthorizationError):
        container.salary_service.get_salary(ctx_for(me), theirs["id"])
    with pytest.raises(AuthorizationError):
        container.salary_service.create_salary(ctx_for(me), _salary(me["id"], month=4))


def test_salary_ids_stay_unique(container, admin_ctx, make_employee):
    employee = make_employee()
    container.salary_service.create_salary(admin_ctx, _salary(employee["id"], salaryId="SAL001"))

    with pytest.raises(ConflictError):
        container.salary_service.create_salary(admin_ctx, _salary(employee["id"], month=2, salaryId="SAL001"))

    assigned = container.salary_service.create_salary(admin_ctx, _salary(employee["id"], month=3), assign_salary_id=True)
    assert assigned["salaryId"] == "SAL002"


@pytest.mark.parametrize(
    "overrides",
    [
        {"basicSalary": "abc"},
        {"basicSalary": float("nan")},
        {"allowances": "HRA"},
        {"allowances": [5000]},
        {"deductions": [{"name": "PF", "amount": "lots"}]},
        {"netSalary": {"value": 1}},
    ],
)
def test_malformed_amounts_are_rejected(container, admin_ctx, make_employee, overrides):
    employee = make_employee()

    with pytest.raises(ValidationError):
        container.salary_service.create_salary(admin_ctx, _salary(employee["id"], **overrides))

    assert container.salary_service.list_salaries_for_employee(admin_ctx, employee["id"]) == []


def test_update_rejects_malformed_amounts(container, admin_ctx, make_employee):
    employee = make_employee()
    salary = container.salary_service.create_salary(admin_ctx, _salary(employee["id"]))

    with pytest.raises(ValidationError):
        container.salary_service.update_salary(admin_ctx, salary["id"], {"allowances": [{"amount": "x"}]})

    assert container.salary_service.get_salary(admin_ctx, salary["id"])["netSalary"] == 33200
