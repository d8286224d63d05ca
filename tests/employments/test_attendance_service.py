from __future__ import annotations

import threading
from datetime import datetime, time

import pytest

from src.hr_records.hr_records.core.enums import AttendanceStatus
from src.hr_records.hr_records.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from src.hr_records.hr_records.employments.attendance_rules import AttendanceRules


@pytest.fixture
def worker(container, admin_ctx, make_employee):
    employee = make_employee()
    container.employment_service.create_employment(admin_ctx, {"employeeId": employee["id"], "designation": "Clerk"})
    return employee


def test_on_time_check_in_is_present(container, worker, ctx_for):
    entry = container.attendance_service.check_in(ctx_for(worker), worker["id"], now=datetime(2024, 1, 15, 9, 55))

    assert entry.status == AttendanceStatus.PRESENT
    assert entry.is_late is False
    assert entry.date == "2024-01-15"
    assert entry.check_in_time == "09:55:00"


def test_check_in_after_office_start_is_late(container, worker, ctx_for):
    entry = container.attendance_service.check_in(ctx_for(worker), worker["id"], now=datetime(2024, 1, 15, 10, 1))

    assert entry.status == AttendanceStatus.LATE
    assert entry.is_late is True


def test_second_check_in_same_day_is_duplicate(container, worker, ctx_for):
    ctx = ctx_for(worker)
    container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 15, 9, 0))

    with pytest.raises(DuplicateError):
        container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 15, 11, 0))

    container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 16, 9, 0))
    assert len(container.attendance_service.history(ctx, worker["id"])) == 2


def test_simultaneous_check_ins_only_one_wins(container, worker, ctx_for):
    ctx = ctx_for(worker)
    now = datetime(2024, 1, 15, 9, 45)
    outcomes = []
    barrier = threading.Barrier(2)

    def attempt():
        barrier.wait()
        try:
            container.attendance_service.check_in(ctx, worker["id"], now=now)
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    assert len(container.attendance_service.history(ctx, worker["id"])) == 1


def test_full_day_check_out(container, worker, ctx_for):
    ctx = ctx_for(worker)
    container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 15, 9, 50))

    entry = container.attendance_service.check_out(ctx, worker["id"], now=datetime(2024, 1, 15, 18, 20))

    assert entry.total_hours == 8.5
    assert entry.status == AttendanceStatus.PRESENT
    assert entry.is_early_check_out is False
    assert entry.is_checked_out


def test_short_day_becomes_half_day_and_early(container, worker, ctx_for):
    ctx = ctx_for(worker)
    container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 15, 10, 30))

    entry = container.attendance_service.check_out(ctx, worker["id"], now=datetime(2024, 1, 15, 13, 30))

    assert entry.total_hours == 3.0
    assert entry.status == AttendanceStatus.HALF_DAY
    assert entry.is_early_check_out is True


def test_check_out_without_check_in(container, worker, ctx_for):
    with pytest.raises(NotFoundError):
        container.attendance_service.check_out(ctx_for(worker), worker["id"], now=datetime(2024, 1, 15, 18, 0))


def test_double_check_out_rejected(container, worker, ctx_for):
    ctx = ctx_for(worker)
    container.attendance_service.check_in(ctx, worker["id"], now=datetime(2024, 1, 15, 9, 0))
    container.attendance_service.check_out(ctx, worker["id"], now=datetime(2024, 1, 15, 18, 0))

    with pytest.raises(ValidationError):
        container.attendance_service.check_out(ctx, worker["id"], now=datetime(2024, 1, 15, 19, 0))


def test_admin_cannot_check_in_for_employee(container, worker, admin_ctx):
    with pytest.raises(AuthorizationError):
        container.attendance_service.check_in(admin_ctx, worker["id"])


def test_check_in_without_employment_record(container, make_employee, ctx_for):
    loner = make_employee()

    with pytest.raises(NotFoundError):
        container.attendance_service.check_in(ctx_for(loner), loner["id"])


def test_history_filters_by_month_and_sorts_newest_first(container, worker, ctx_for, admin_ctx):
    ctx = ctx_for(worker)
    for day in (datetime(2024, 1, 30, 9), datetime(2024, 2, 1, 9), datetime(2024, 2, 2, 9)):
        container.attendance_service.check_in(ctx, worker["id"], now=day)

    february = container.attendance_service.history(admin_ctx, worker["id"], month=2, year=2024)

    assert [e.date for e in february] == ["2024-02-02", "2024-02-01"]


def test_grace_minutes_move_the_late_cutoff():
    rules = AttendanceRules(office_start=time(9, 0), grace_minutes=15)
    today = datetime(2024, 1, 15).date()

    assert rules.decide_checkin(now=datetime(2024, 1, 15, 9, 15), today=today).is_late is False
    assert rules.decide_checkin(now=datetime(2024, 1, 15, 9, 16), today=today).is_late is True
