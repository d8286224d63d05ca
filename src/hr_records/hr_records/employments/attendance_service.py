from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from ..auth.guard import require_self, require_self_or_admin
from ..auth.model import AuthContext
from ..common.datetime_utils import iso, now_local, parse_iso_datetime
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from ..records.model import Record
from .attendance_rules import AttendanceRules
from .model import AttendanceEntry
from .mutator import EmbeddedCollectionMutator, Items
from .repository import EmploymentRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        employments: EmploymentRepository,
        mutator: EmbeddedCollectionMutator,
        *,
        rules: Optional[AttendanceRules] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employments = employments
        self._mutator = mutator
        self._rules = rules or AttendanceRules()
        self._clock = clock

    def _employment_for(self, employee_id: str) -> Record:
        employment = self._employments.get_for_employee(employee_id)
        if not employment:
            raise NotFoundError("No employment record found for this employee.")
        return employment

    def check_in(self, ctx: AuthContext, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceEntry:
        require_self(ctx, employee_id)
        now = now or self._clock()
        today = now.date()
        employment = self._employment_for(employee_id)
        decision = self._rules.decide_checkin(now=now, today=today)

        entry = AttendanceEntry(
            date=today.isoformat(),
            check_in_time=now.strftime("%H:%M:%S"),
            check_in_timestamp=iso(now),
            status=decision.status,
            is_late=decision.is_late,
        )

        def append(items: Items):
            if any(item.get("date") == entry.date for item in items):
                raise DuplicateError("You have already checked in today")
            return items + [entry.to_doc()], entry

        result = self._mutator.mutate(employment["id"], "attendance", append, actor_id=ctx.principal_id)
        logger.info("Check-in %s for employee %s (%s)", entry.date, employee_id, entry.status.value)
        return result.value

    def check_out(self, ctx: AuthContext, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceEntry:
        require_self(ctx, employee_id)
        now = now or self._clock()
        today = now.date()
        employment = self._employment_for(employee_id)

        def close(items: Items):
            for index, item in enumerate(items):
                if item.get("date") != today.isoformat():
                    continue
                entry = AttendanceEntry.from_doc(item)
                if entry.is_checked_out:
                    raise ValidationError("You have already checked out today")

                checked_in_at = parse_iso_datetime(entry.check_in_timestamp)
                decision = self._rules.decide_checkout(
                    now=now,
                    today=today,
                    checked_in_at=checked_in_at,
                    current=entry.status,
                )
                closed = replace(
                    entry,
                    check_out_time=now.strftime("%H:%M:%S"),
                    check_out_timestamp=iso(now),
                    total_hours=decision.total_hours,
                    status=decision.status,
                    is_early_check_out=decision.is_early_check_out,
                )
                items[index] = closed.to_doc()
                return items, closed
            raise NotFoundError("You have not checked in today")

        result = self._mutator.mutate(employment["id"], "attendance", close, actor_id=ctx.principal_id)
        logger.info("Check-out %s for employee %s (%.2fh)", today, employee_id, result.value.total_hours)
        return result.value

    def today(self, ctx: AuthContext, employee_id: str, *, now: Optional[datetime] = None) -> Optional[AttendanceEntry]:
        require_self_or_admin(ctx, employee_id)
        today = (now or self._clock()).date().isoformat()
        for item in self._employment_for(employee_id).get("attendance") or []:
            if item.get("date") == today:
                return AttendanceEntry.from_doc(item)
        return None

    def history(
        self,
        ctx: AuthContext,
        employee_id: str,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[AttendanceEntry]:
        """Entries newest first, optionally limited to one month/year."""
        require_self_or_admin(ctx, employee_id)
        entries = [AttendanceEntry.from_doc(i) for i in self._employment_for(employee_id).get("attendance") or []]
        if year is not None:
            entries = [e for e in entries if int(e.date[:4]) == int(year)]
        if month is not None:
            entries = [e for e in entries if int(e.date[5:7]) == int(month)]
        return sorted(entries, key=lambda e: e.date, reverse=True)
