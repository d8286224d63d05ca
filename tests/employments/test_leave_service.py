from __future__ import annotations

import pytest

from src.hr_records.hr_records.core.constants import ADMINS
from src.hr_records.hr_records.core.enums import LeaveStatus
from src.hr_records.hr_records.core.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    NotFoundError,
    StoreError,
    ValidationError,
)


@pytest.fixture
def worker(container, admin_ctx, make_employee):
    employee = make_employee()
    employment = container.employment_service.create_employment(admin_ctx, {"employeeId": employee["id"]})
    return employee, employment


def _apply(container, ctx, employee_id, **overrides):
    params = dict(leave_type="casual", start_date="2024-01-01", end_date="2024-01-03", reason="Family function")
    params.update(overrides)
    return container.leave_service.apply(ctx, employee_id, **params)


def test_apply_counts_days_inclusively(container, worker, ctx_for):
    employee, _ = worker

    leave = _apply(container, ctx_for(employee), employee["id"])

    assert leave.total_days == 3
    assert leave.status == LeaveStatus.PENDING
    assert leave.was_edited is False


def test_single_day_leave_counts_one(container, worker, ctx_for):
    employee, _ = worker

    leave = _apply(container, ctx_for(employee), employee["id"], end_date="2024-01-01")

    assert leave.total_days == 1


def test_end_before_start_rejected(container, worker, ctx_for):
    employee, _ = worker

    with pytest.raises(ValidationError):
        _apply(container, ctx_for(employee), employee["id"], start_date="2024-01-05", end_date="2024-01-01")


def test_unknown_leave_type_rejected(container, worker, ctx_for):
    employee, _ = worker

    with pytest.raises(ValidationError):
        _apply(container, ctx_for(employee), employee["id"], leave_type="vacation")


def test_edit_pending_leave_recomputes_days(container, worker, ctx_for):
    employee, _ = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])

    edited = container.leave_service.edit(ctx, employee["id"], leave.leave_id, end_date="2024-01-05")

    assert edited.total_days == 5
    assert edited.was_edited is True


def test_approve_then_no_further_transitions(container, worker, ctx_for, admin_ctx):
    employee, employment = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])

    approved = container.leave_service.approve(admin_ctx, employment["id"], leave.leave_id)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == admin_ctx.principal_id
    assert approved.approved_at

    with pytest.raises(ValidationError):
        container.leave_service.reject(admin_ctx, employment["id"], leave.leave_id)
    with pytest.raises(ValidationError):
        container.leave_service.edit(ctx, employee["id"], leave.leave_id, reason="changed")
    with pytest.raises(ValidationError):
        container.leave_service.cancel(ctx, employee["id"], leave.leave_id)


def test_reject_stamps_rejecter(container, worker, ctx_for, admin_ctx):
    employee, employment = worker
    leave = _apply(container, ctx_for(employee), employee["id"])

    rejected = container.leave_service.reject(admin_ctx, employment["id"], leave.leave_id)

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejected_by == admin_ctx.principal_id


@pytest.mark.parametrize("target", ["pending", "cancelled", "whatever"])
def test_decision_must_be_approve_or_reject(container, worker, ctx_for, admin_ctx, target):
    employee, employment = worker
    leave = _apply(container, ctx_for(employee), employee["id"])

    with pytest.raises(ValidationError):
        container.leave_service.decide(admin_ctx, employment["id"], leave.leave_id, target)


def test_cancel_removes_pending_leave(container, worker, ctx_for):
    employee, _ = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])

    container.leave_service.cancel(ctx, employee["id"], leave.leave_id)

    assert container.leave_service.list_for_employee(ctx, employee["id"]) == []
    with pytest.raises(NotFoundError):
        container.leave_service.cancel(ctx, employee["id"], leave.leave_id)


def test_employee_cannot_decide(container, worker, ctx_for):
    employee, employment = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])

    with pytest.raises(AuthorizationError):
        container.leave_service.approve(ctx, employment["id"], leave.leave_id)


def test_stale_expected_version_is_refused(container, worker, ctx_for, admin_ctx):
    employee, employment = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])
    seen_version = container.employment_service.get_employment(admin_ctx, employment["id"])["version"]

    # The employee edits after the admin loaded the record.
    container.leave_service.edit(ctx, employee["id"], leave.leave_id, reason="Wedding")

    with pytest.raises(ConcurrencyError):
        container.leave_service.approve(admin_ctx, employment["id"], leave.leave_id, expected_version=seen_version)

    fresh = container.employment_service.get_employment(admin_ctx, employment["id"])["version"]
    approved = container.leave_service.approve(admin_ctx, employment["id"], leave.leave_id, expected_version=fresh)
    assert approved.reason == "Wedding"


def test_pending_list_and_decider_name(container, worker, ctx_for, admin_ctx):
    employee, employment = worker
    ctx = ctx_for(employee)
    first = _apply(container, ctx, employee["id"])
    _apply(container, ctx, employee["id"], start_date="2024-02-01", end_date="2024-02-01")

    assert len(container.leave_service.list_pending(admin_ctx)) == 2

    container.leave_service.approve(admin_ctx, employment["id"], first.leave_id)

    assert len(container.leave_service.list_pending(admin_ctx)) == 1
    views = container.leave_service.list_for_employee(ctx, employee["id"], year=2024)
    decided = [v for v in views if v.leave.leave_id == first.leave_id][0]
    assert decided.decided_by_name == "Head Office"


def test_decider_lookup_failure_shows_placeholder(container, worker, ctx_for, admin_ctx, monkeypatch):
    employee, employment = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])
    container.leave_service.approve(admin_ctx, employment["id"], leave.leave_id)

    def broken(*args, **kwargs):
        raise StoreError("store unavailable")

    monkeypatch.setattr(container.principals_repo, "get_by_id", broken)

    views = container.leave_service.list_for_employee(ctx, employee["id"])
    assert views[0].decided_by_name == "Unknown"


def test_deleted_admin_shows_placeholder(container, store, worker, ctx_for, admin_ctx):
    employee, employment = worker
    ctx = ctx_for(employee)
    leave = _apply(container, ctx, employee["id"])
    container.leave_service.approve(admin_ctx, employment["id"], leave.leave_id)
    store.delete(ADMINS, admin_ctx.principal_id)

    assert container.leave_service.list_for_employee(ctx, employee["id"])[0].decided_by_name == "Unknown"
