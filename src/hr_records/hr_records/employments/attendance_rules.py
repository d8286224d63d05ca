from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..core.constants import (
    DEFAULT_HALF_DAY_HOURS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_OFFICE_END,
    DEFAULT_OFFICE_START,
)
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class CheckInDecision:
    status: AttendanceStatus
    is_late: bool


@dataclass(frozen=True)
class CheckOutDecision:
    status: AttendanceStatus
    total_hours: float
    is_early_check_out: bool


@dataclass(frozen=True)
class AttendanceRules:
    """Fixed office cut-offs that decide late / half-day / early check-out."""

    office_start: time = DEFAULT_OFFICE_START
    office_end: time = DEFAULT_OFFICE_END
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    half_day_hours: float = DEFAULT_HALF_DAY_HOURS

    def decide_checkin(self, *, now: datetime, today: date) -> CheckInDecision:
        cutoff = datetime.combine(today, self.office_start) + timedelta(minutes=self.grace_minutes)
        if now > cutoff:
            return CheckInDecision(status=AttendanceStatus.LATE, is_late=True)
        return CheckInDecision(status=AttendanceStatus.PRESENT, is_late=False)

    def decide_checkout(
        self,
        *,
        now: datetime,
        today: date,
        checked_in_at: datetime,
        current: AttendanceStatus,
    ) -> CheckOutDecision:
        total_hours = round(max((now - checked_in_at).total_seconds(), 0) / 3600, 2)
        status = AttendanceStatus.HALF_DAY if total_hours < self.half_day_hours else current
        early = now < datetime.combine(today, self.office_end)
        return CheckOutDecision(status=status, total_hours=total_hours, is_early_check_out=early)
