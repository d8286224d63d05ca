from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from ..auth.guard import require_admin, require_self, require_self_or_admin
from ..auth.model import AuthContext
from ..auth.repository import PrincipalRepository
from ..common.datetime_utils import inclusive_day_count, iso, now_local, parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import UNKNOWN_DISPLAY_NAME
from ..core.enums import LeaveStatus, LeaveType, PrincipalKind
from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..database.document_store import new_document_id
from ..records.model import Record
from .model import LeaveRecord
from .mutator import EmbeddedCollectionMutator, Items
from .repository import EmploymentRepository

logger = logging.getLogger(__name__)

# pending is the only state a decision can leave.
_DECISIONS = {LeaveStatus.APPROVED, LeaveStatus.REJECTED}


@dataclass(frozen=True)
class LeaveView:
    employment_id: str
    employee_id: str
    leave: LeaveRecord
    decided_by_name: Optional[str] = None


def _parse_leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError(f"Unknown leave type: {value!r}")


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")


def _find(items: Items, leave_id: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == leave_id:
            return index
    raise NotFoundError("Leave request not found")


class LeaveService:
    """Leave requests embedded in the employee's Employment document.

    State machine: pending -> approved | rejected (both terminal). Cancelling removes
    the entry from the array instead of storing a cancelled status.
    """

    def __init__(
        self,
        employments: EmploymentRepository,
        principals: PrincipalRepository,
        mutator: EmbeddedCollectionMutator,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employments = employments
        self._principals = principals
        self._mutator = mutator
        self._clock = clock

    def _employment_for(self, employee_id: str) -> Record:
        employment = self._employments.get_for_employee(employee_id)
        if not employment:
            raise NotFoundError("No employment record found for this employee.")
        return employment

    def apply(
        self,
        ctx: AuthContext,
        employee_id: str,
        *,
        leave_type: str,
        start_date,
        end_date,
        reason: str,
    ) -> LeaveRecord:
        require_self(ctx, employee_id)
        start, end = parse_iso_date(start_date), parse_iso_date(end_date)
        _check_range(start, end)

        leave = LeaveRecord(
            leave_id=new_document_id(),
            leave_type=_parse_leave_type(leave_type),
            start_date=start,
            end_date=end,
            reason=require_non_empty(reason, "Reason"),
            total_days=inclusive_day_count(start, end),
            status=LeaveStatus.PENDING,
            applied_date=iso(self._clock()),
        )
        employment = self._employment_for(employee_id)
        self._mutator.mutate(
            employment["id"],
            "leaves",
            lambda items: (items + [leave.to_doc()], leave),
            actor_id=ctx.principal_id,
        )
        logger.info("Leave %s applied by employee %s (%s days)", leave.leave_id, employee_id, leave.total_days)
        return leave

    def edit(
        self,
        ctx: AuthContext,
        employee_id: str,
        leave_id: str,
        *,
        leave_type: Optional[str] = None,
        start_date=None,
        end_date=None,
        reason: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> LeaveRecord:
        require_self(ctx, employee_id)
        employment = self._employment_for(employee_id)

        def change(items: Items):
            index = _find(items, leave_id)
            leave = LeaveRecord.from_doc(items[index])
            if not leave.is_pending:
                raise ValidationError("Only pending leave requests can be edited")

            start = parse_iso_date(start_date) if start_date else leave.start_date
            end = parse_iso_date(end_date) if end_date else leave.end_date
            _check_range(start, end)
            edited = leave.with_changes(
                leave_type=_parse_leave_type(leave_type) if leave_type else leave.leave_type,
                start_date=start,
                end_date=end,
                reason=require_non_empty(reason, "Reason") if reason is not None else leave.reason,
                total_days=inclusive_day_count(start, end),
                was_edited=True,
            )
            items[index] = edited.to_doc()
            return items, edited

        result = self._mutator.mutate(
            employment["id"],
            "leaves",
            change,
            actor_id=ctx.principal_id,
            expected_version=expected_version,
        )
        return result.value

    def cancel(
        self,
        ctx: AuthContext,
        employee_id: str,
        leave_id: str,
        *,
        expected_version: Optional[int] = None,
    ) -> None:
        require_self(ctx, employee_id)
        employment = self._employment_for(employee_id)

        def remove(items: Items):
            index = _find(items, leave_id)
            if items[index].get("status", LeaveStatus.PENDING.value) != LeaveStatus.PENDING.value:
                raise ValidationError("Only pending leave requests can be cancelled")
            return items[:index] + items[index + 1:], None

        self._mutator.mutate(
            employment["id"],
            "leaves",
            remove,
            actor_id=ctx.principal_id,
            expected_version=expected_version,
        )
        logger.info("Leave %s cancelled by employee %s", leave_id, employee_id)

    def decide(
        self,
        ctx: AuthContext,
        employment_id: str,
        leave_id: str,
        status,
        *,
        expected_version: Optional[int] = None,
    ) -> LeaveRecord:
        """Administrator decision on a pending leave: approved or rejected, nothing else."""
        require_admin(ctx)
        try:
            target = LeaveStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown leave status: {status!r}")
        if target not in _DECISIONS:
            raise ValidationError(f"Leave requests cannot be moved to {target.value}")

        stamp = iso(self._clock())

        def transition(items: Items):
            index = _find(items, leave_id)
            leave = LeaveRecord.from_doc(items[index])
            if not leave.is_pending:
                raise ValidationError(f"Leave request is already {leave.status.value}")
            if target == LeaveStatus.APPROVED:
                decided = leave.with_changes(status=target, approved_by=ctx.principal_id, approved_at=stamp)
            else:
                decided = leave.with_changes(status=target, rejected_by=ctx.principal_id, rejected_at=stamp)
            items[index] = decided.to_doc()
            return items, decided

        result = self._mutator.mutate(
            employment_id,
            "leaves",
            transition,
            actor_id=ctx.principal_id,
            expected_version=expected_version,
        )
        logger.info("Leave %s %s by %s", leave_id, target.value, ctx.principal_id)
        return result.value

    def approve(self, ctx: AuthContext, employment_id: str, leave_id: str, *, expected_version: Optional[int] = None) -> LeaveRecord:
        return self.decide(ctx, employment_id, leave_id, LeaveStatus.APPROVED, expected_version=expected_version)

    def reject(self, ctx: AuthContext, employment_id: str, leave_id: str, *, expected_version: Optional[int] = None) -> LeaveRecord:
        return self.decide(ctx, employment_id, leave_id, LeaveStatus.REJECTED, expected_version=expected_version)

    def _decider_name(self, leave: LeaveRecord) -> Optional[str]:
        decider = leave.approved_by or leave.rejected_by
        if not decider:
            return None
        try:
            admin = self._principals.get_by_id(PrincipalKind.ADMIN, decider)
        except StoreError:
            # Display only: a lookup failure must not fail the listing.
            logger.warning("Could not resolve approver %s", decider)
            return UNKNOWN_DISPLAY_NAME
        return admin.name if admin else UNKNOWN_DISPLAY_NAME

    def _views(self, employment: Record, *, year: Optional[int] = None) -> List[LeaveView]:
        views = []
        for item in employment.get("leaves") or []:
            leave = LeaveRecord.from_doc(item)
            if year is not None and leave.start_date.year != int(year):
                continue
            views.append(
                LeaveView(
                    employment_id=employment["id"],
                    employee_id=employment.get("employeeId", ""),
                    leave=leave,
                    decided_by_name=self._decider_name(leave),
                )
            )
        return sorted(views, key=lambda v: v.leave.start_date, reverse=True)

    def list_for_employee(self, ctx: AuthContext, employee_id: str, *, year: Optional[int] = None) -> List[LeaveView]:
        require_self_or_admin(ctx, employee_id)
        return self._views(self._employment_for(employee_id), year=year)

    def list_pending(self, ctx: AuthContext) -> List[LeaveView]:
        require_admin(ctx)
        pending: List[LeaveView] = []
        for employment in self._employments.list():
            pending.extend(v for v in self._views(employment) if v.leave.is_pending)
        return sorted(pending, key=lambda v: v.leave.applied_date)
